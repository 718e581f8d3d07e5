from os import mkdir
from os import listdir
from os.path import normpath
from os.path import join as pathjoin
from os.path import split
from os.path import isabs
from os.path import exists
from os.path import isdir
from os.path import isfile, islink, sep
from errno import EEXIST as FileExists
from errno import EISDIR as DirectoryExists
from fnmatch import fnmatchcase
from func_prototypes import typed, returned


LINK = u'link'
FILE = u'file'
DIR = u'dir'

class Path:
  def __init__(self, path, frame=None):
    if path is None:
      raise ValueError("path must be defined")
    elif isinstance(path, Path):
      assert frame is None
      self._path = path._path
    elif isinstance(path, str):
      if isabs(path):
        assert frame is None, "Frame %s is meaningless for absolute path %s" % (frame, path)
        self._path = normpath(path)
      elif frame is None:
        raise ValueError("Frame is required when building relative paths: %s" % path)
      else:
        assert isinstance(frame, Path)
        self._path = normpath(pathjoin(frame._path, path))
    else:
      raise ValueError("Cannot build a Path from %s" % type(path))

  def __str__(self):
    return self._path

  def __repr__(self):
    return "Path(%r)" % self._path

  def _parts(self):
    return self._path.split(sep)

  def __eq__(self, other):
    return isinstance(other, Path) and self._path == other._path

  def __ne__(self, other):
    return not self.__eq__(other)

  def __lt__(self, other):
    assert isinstance(other, Path)
    return self._parts() < other._parts()

  def __hash__(self):
    return hash(self._path)

  def name(self):
    return split(self._path)[1]

  # Returns None for the parent of root, unlike POSIX where '/..' is '/'.
  def parent(self):
    if self._path == sep:
      return None
    return Path(split(self._path)[0])

  def parents(self):
    """Yields root first, self last."""
    paths = [self]
    parent = self.parent()
    while parent is not None:
      paths.append(parent)
      parent = parent.parent()
    return reversed(paths)

  def relative_to(self, relative):
    """
    Returns a '/' separated string leading from relative to self.
    Backs out with '..' when self is not under relative.
    """
    assert isinstance(relative, Path)
    self_parts = [p for p in self._parts() if p]
    other_parts = [p for p in relative._parts() if p]
    common = 0
    for (a, b) in zip(self_parts, other_parts):
      if a != b:
        break
      common += 1
    backups = [".."] * (len(other_parts) - common)
    rest = self_parts[common:]
    out = "/".join(backups + rest)
    return out or "."

  def join(self, child):
    assert isinstance(child, str)
    return Path(child, self)

  def exists(self):
    return exists(self._path)

  def islink(self):
    return islink(self._path)

  def isdir(self):
    return isdir(self._path)

  def isfile(self):
    return isfile(self._path)

  def mkdir(self):
    try:
      mkdir(self._path)
    except OSError as e:
      if e.errno in (FileExists, DirectoryExists):
        pass
      else:
        raise e

  def open(self, mode, encoding=None):
    if 'b' in mode:
      return open(self._path, mode)
    return open(self._path, mode, encoding=encoding or 'utf-8')

  def content(self, mode='r'):
    with self.open(mode) as fd:
      return fd.read()

  def dir_gen(self):
    """Generates the Paths directly under this directory, sorted by name."""
    assert self.isdir(), "%s is not a directory" % self._path
    for name in sorted(listdir(self._path)):
      yield self.join(name)

  def ftype(self):
    if self.islink():
      return LINK
    elif self.isfile():
      return FILE
    elif self.isdir():
      return DIR
    else:
      return None

def walk(top, skip=None):
  """
  Yields (Path, type) for top and everything beneath it, parents before children.
  skip is a predicate (path, type) -> bool; skipped directories are not descended.
  Symlinked directories are reported as links and not followed.
  """
  assert isinstance(top, Path)
  dirs = [top]
  while dirs:
    d = dirs.pop()
    type_ = d.ftype()
    if type_ is None:
      continue
    if skip is not None and skip(d, type_):
      continue
    yield (d, type_)
    if type_ == DIR:
      dirs.extend(reversed(list(d.dir_gen())))

def ftype_selector(types):
  keep = lambda p: p[1] in types
  return lambda entries: filter(keep, entries)

def skip_ignored(ignored, path, ftype=None):
  """Returns True when path matches any of the ignored glob patterns."""
  for i in ignored:
    if fnmatchcase(str(path), i):
      return True
  return False

@returned(Path)
@typed(str, Path)
def userPath2Path(arg, frame):
  """
  Turns a path handed to us on the command line into a Path.
  Relative arguments are framed by frame, which is usually the cwd.
  """
  if isabs(arg):
    return Path(arg)
  return Path(arg, frame)

@typed(Path)
def ensure_dir(path):
  if path.isdir():
    return
  parent = path.parent()
  assert parent is not None, "Path is root, which must be a directory"
  ensure_dir(parent)
  path.mkdir()

def ensure_file(path, mode):
  """Creates parent directories as needed and opens path with mode."""
  assert isinstance(path, Path)
  parent = path.parent()
  assert parent != path, "Path and parent were the same!"
  ensure_dir(parent)
  return path.open(mode)

ROOT = Path(sep)
