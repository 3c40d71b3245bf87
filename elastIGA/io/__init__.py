"""
Input handling: keyword tokenizer, XML helpers and driver configuration.
"""

from .tokenizer import InputError, LineTokenizer, read_line
from .xmlutils import get_attribute, get_text, tag_is
from .config import SimulationConfig, ElasticityConfig, load_config
