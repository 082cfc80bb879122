import logging

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

load_dotenv()
