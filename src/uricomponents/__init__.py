__version__ = "0.1"

import logging

from .exceptions import InvalidCharacters, InvalidHost, InvalidHostname, InvalidPath, InvalidPort, InvalidScheme, URISyntaxError
from .parser import Parser, URIComponents, idna_to_ascii, is_host, is_port, is_scheme, parse

logging.getLogger(__name__).addHandler(logging.NullHandler())
