from questmap.domain.usecase.scores.record_score import record_score_best_effort

__all__ = ["record_score_best_effort"]
