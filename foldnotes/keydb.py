from foldnotes.fs import Path, ensure_file
from hashlib import md5
from json import loads, JSONEncoder
from errno import ENOENT as NoSuchFile
from errno import EISDIR as IsDirectory
from func_prototypes import typed, returned
from foldnotes.util import egest, ingest, safetype

@returned(str)
@typed(bytes)
def checksum(value_bytes):
  """Input should already be encoded to bytes."""
  return md5(value_bytes).hexdigest()

_encoder = JSONEncoder(ensure_ascii=False, sort_keys=True)

class KeyDB:
  """
  Directory of small JSON values, one file per key.
  Each file holds the encoded value on its first line and the value's md5 on its second.
  """
  def __init__(self, db_path):
    assert isinstance(db_path, Path)
    self.root = db_path

  def _key_path(self, key):
    key = safetype(key)
    path = self.root.join(key)
    assert self.root in path.parents() and path != self.root, "Key %s escapes %s" % (key, self.root)
    return path

  def write(self, key, value, force=False):
    key_path = self._key_path(key)
    if not force and key_path.exists():
      raise ValueError("Key %s already exists" % key)
    value_bytes = egest(_encoder.encode(value))
    with ensure_file(key_path, 'wb') as f:
      f.write(value_bytes)
      f.write(b"\n")
      f.write(egest(checksum(value_bytes)))
      f.write(b"\n")

  def readraw(self, key):
    key_path = self._key_path(key)
    try:
      with key_path.open('rb') as f:
        value_bytes = f.readline().strip()
        key_checksum = ingest(f.readline().strip())
    except IOError as e:
      if e.errno == NoSuchFile or e.errno == IsDirectory:
        return None
      raise e
    value_checksum = checksum(value_bytes)
    if value_checksum != key_checksum:
      raise ValueError("Checksum mismatch for key %s. Expected %s, calculated %s" % (key, key_checksum, value_checksum))
    return ingest(value_bytes)

  def read(self, key):
    value_str = self.readraw(key)
    if value_str is None:
      return None
    return loads(value_str)
