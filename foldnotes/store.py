from errno import ENOENT as NoSuchFile
from typing import Dict, Iterator, List, Optional
from foldnotes.keydb import KeyDB
from foldnotes.fs import Path, ensure_dir, skip_ignored, ftype_selector, walk, FILE, LINK
from foldnotes.document import Document
from foldnotes.markdown import parse, strip_target
from foldnotes.util import safetype, partial, ingest, pipeline, fmap, ffilter, first
from os.path import sep

SUFFIX = u'.md'
ASSETS_KEY = u'assets'

class NotFoundError(KeyError):
    """Raised when a document id names no document in the store."""
    def __init__(self, document_id):
        KeyError.__init__(self, document_id)
        self.document_id = document_id

    def __str__(self):
        return "Document not found: %s" % self.document_id

def _metadata_path(root):
    assert isinstance(root, Path)
    return root.join(".foldnotes")

def _keys_path(root):
    return _metadata_path(root).join("keys")

def _ignore_path(root):
    return root.join(".foldignore")

def init(root, assets=None):
    """
    Marks root as a document store. assets is the root of the asset store,
    which defaults to root itself.
    """
    assert isinstance(root, Path)
    if assets is None:
        assets = root
    assert isinstance(assets, Path)
    ensure_dir(root)
    ensure_dir(_keys_path(root))
    kdb = KeyDB(_keys_path(root))
    kdb.write(ASSETS_KEY, safetype(assets), True)
    return DocumentStore(root)

def find_root(path):
    """Returns the nearest directory at or above path which holds a store."""
    candidates = [p for p in path.parents() if _metadata_path(p).isdir()]
    if not candidates:
        raise ValueError("Store not found: %s" % path)
    if len(candidates) > 1:
        raise ValueError("Document stores cannot be nested: %s" % ", ".join(map(str, candidates)))
    return candidates[-1]

def getstore(path):
    return DocumentStore(find_root(path))

def read_ignored(root):
    """Glob patterns from the root's ignore file, framed by root."""
    ignored = []
    try:
        with _ignore_path(root).open('rb') as exclude_fd:
            for raw_pattern in exclude_fd.readlines():
                pattern = ingest(raw_pattern.strip())
                if pattern.startswith('#'):
                    continue
                # A leading slash anchors the pattern at the root.
                pattern = pattern.lstrip(sep)
                if pattern:
                    ignored.append(safetype(Path(pattern, root)))
    except IOError as e:
        if e.errno != NoSuchFile:
            raise e
    return ignored

class StaticDocumentStore:
    """A fixed, in memory collection of Documents keyed by id."""
    def __init__(self, documents):
        self._documents = {}
        for doc in documents:
            assert isinstance(doc, Document), doc
            if doc.id in self._documents:
                raise ValueError("Document %s is listed twice" % doc.id)
            self._documents[doc.id] = doc

    def list(self) -> List[str]:
        return sorted(self._documents)

    def get(self, document_id: str) -> Document:
        try:
            return self._documents[document_id]
        except KeyError:
            raise NotFoundError(document_id)

    def documents(self) -> Iterator[Document]:
        return map(self.get, self.list())

class FileAssetStore:
    """
    Answers whether the assets documents point at are present on disk.
    Relative asset paths are taken from the document's directory; paths with
    a leading '/' are taken from the asset root.
    """
    def __init__(self, root, docs_root=None):
        assert isinstance(root, Path)
        self.root = root
        self.docs_root = docs_root or root
        assert isinstance(self.docs_root, Path)

    def asset_path(self, document_id, path):
        path = strip_target(path)
        if path.startswith(sep):
            return Path("." + path, self.root)
        doc_dir = Path(document_id + SUFFIX, self.docs_root).parent()
        return Path(path, doc_dir)

    def exists(self, document_id, path):
        return self.asset_path(document_id, path).isfile()

    def assets(self) -> Iterator[Path]:
        """Every file under the asset root, markdown documents and metadata excluded."""
        is_ignored = partial(skip_ignored, [safetype(_metadata_path(self.docs_root))])
        return pipeline(
            ftype_selector([FILE, LINK]),
            fmap(first),
            ffilter(lambda p: p.isfile() and not p.name().endswith(SUFFIX)))(walk(self.root, skip=is_ignored))

class DocumentStore:
    """
    Markdown documents stored as files under root.
    A document's id is its path relative to root without the .md suffix.
    """
    def __init__(self, root):
        assert isinstance(root, Path)
        self.root = root
        self.mdd = _metadata_path(root)
        self.keydb = KeyDB(_keys_path(root))
        assets: Optional[str] = self.keydb.read(ASSETS_KEY)
        assets_root = Path(assets) if assets is not None else root
        self.assets = FileAssetStore(assets_root, root)
        ignored = [safetype(self.mdd)] + read_ignored(root)
        self.is_ignored = partial(skip_ignored, ignored)
        self._cache: Dict[str, Document] = {}

    def _document_path(self, document_id):
        return Path(document_id + SUFFIX, self.root)

    def _document_id(self, path):
        rel = path.relative_to(self.root)
        return rel[:-len(SUFFIX)]

    def paths(self) -> Iterator[Path]:
        """Yields the Paths of all the markdown documents in the store."""
        return pipeline(
            ftype_selector([FILE, LINK]),
            fmap(first),
            ffilter(lambda p: p.name().endswith(SUFFIX) and p.name() != SUFFIX and p.isfile()))(walk(self.root, skip=self.is_ignored))

    def list(self) -> List[str]:
        return sorted(map(self._document_id, self.paths()))

    def get(self, document_id: str) -> Document:
        if not isinstance(document_id, safetype) or not document_id \
                or document_id.startswith(sep) or document_id.endswith(sep):
            raise NotFoundError(document_id)
        if document_id in self._cache:
            return self._cache[document_id]
        path = self._document_path(document_id)
        if self.root not in path.parents() or path == self.root \
                or self._document_id(path) != document_id \
                or any(self.is_ignored(p) for p in path.parents()) \
                or not path.isfile():
            raise NotFoundError(document_id)
        doc = parse(document_id, path.content())
        self._cache[document_id] = doc
        return doc

    def documents(self) -> Iterator[Document]:
        return map(self.get, self.list())
