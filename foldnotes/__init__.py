from foldnotes.store import getstore, find_root, NotFoundError
from foldnotes.fs import Path
from foldnotes.util import ingest
from os import getcwdb

getcwd_utf = lambda: ingest(getcwdb())

cwd = Path(getcwd_utf())
