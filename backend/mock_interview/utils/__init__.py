"""
Utility functions and helper modules.
"""

from .logger import setup_logger
from .contact_info import extract_contact_info
from .json_utils import extract_json_object
