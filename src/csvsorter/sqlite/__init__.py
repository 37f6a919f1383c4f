from .quoting import quote_identifier
from .script import generate_script
from .runner import run_sqlite
