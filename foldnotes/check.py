"""
Content integrity scanners.

Each scanner takes a Document and yields a Defect for every broken reference
it finds. Defects are content problems, so they are reported, never raised.
"""
from delnone import delnone
from foldnotes.document import normalize_label
from foldnotes.markdown import label_references, image_references
from foldnotes.util import pipeline, fmap, ffilter, concatMap, groupby, uncurry, first, second, uniq

BROKEN_LINK = u'broken-link'
UNDECLARED_ASSET = u'undeclared-asset'
MISSING_ASSET = u'missing-asset'
DUPLICATE_LABEL = u'duplicate-label'
UNUSED_LINK = u'unused-link'

class Defect:
    def __init__(self, document, kind, target, line=None):
        self.document = document
        self.kind = kind
        self.target = target
        self.line = line

    def get_tuple(self):
        return (self.document, self.kind, self.target, self.line)

    def get_dict(self):
        return delnone(dict(document=self.document,
                            kind=self.kind,
                            target=self.target,
                            line=self.line))

    def __eq__(self, other):
        return isinstance(other, Defect) and self.get_tuple() == other.get_tuple()

    def __hash__(self):
        return hash(self.get_tuple())

    def __str__(self):
        where = self.document if self.line is None else "%s:%d" % (self.document, self.line)
        return "%s\t%s\t%s" % (where, self.kind, self.target)

    __repr__ = __str__

def broken_links(doc):
    """Label references with no matching entry in the document's links."""
    return pipeline(
        label_references,
        ffilter(uncurry(lambda label, line: not doc.defines(label))),
        fmap(uncurry(lambda label, line: Defect(doc.id, BROKEN_LINK, label, line))),
    )(doc.body)

def undeclared_assets(doc):
    """Images in the body which the document's assets don't list."""
    return pipeline(
        image_references,
        ffilter(uncurry(lambda path, line: path not in doc.assets)),
        fmap(uncurry(lambda path, line: Defect(doc.id, UNDECLARED_ASSET, path, line))),
    )(doc.body, doc.resolve)

def missing_assets(asset_store):
    """
    Returns a scanner for the document's assets which the asset store doesn't have.
    Each missing asset is reported once, at its first use in the body.
    """
    def missing_asset_scanner(doc):
        first_use = {}
        for (path, line) in image_references(doc.body, doc.resolve):
            first_use.setdefault(path, line)
        return pipeline(
            ffilter(lambda path: not asset_store.exists(doc.id, path)),
            fmap(lambda path: Defect(doc.id, MISSING_ASSET, path, first_use.get(path))),
        )(sorted(doc.assets))
    return missing_asset_scanner

def duplicate_labels(doc):
    """Definitions of a label which was already defined earlier in the body."""
    by_label = groupby(lambda d: normalize_label(d.label), doc.definitions())
    later = pipeline(
        fmap(second),
        ffilter(lambda defs: len(defs) > 1),
        concatMap(lambda defs: defs[1:]))(by_label)
    return pipeline(
        fmap(lambda d: Defect(doc.id, DUPLICATE_LABEL, d.label, d.line)),
    )(sorted(later, key=lambda d: d.line or 0))

def unused_links(doc):
    """Labels in the document's links which nothing in the body refers to."""
    used = pipeline(
        label_references,
        fmap(first),
        fmap(normalize_label),
        set)(doc.body)
    line_of = dict((normalize_label(d.label), d.line) for d in reversed(doc.definitions()))
    return pipeline(
        ffilter(lambda label: normalize_label(label) not in used),
        fmap(lambda label: Defect(doc.id, UNUSED_LINK, label, line_of.get(normalize_label(label)))),
    )(sorted(doc.links))

def check_documents(scanner, documents):
    """Runs scanner over every document, yielding Defects in document order."""
    return pipeline(concatMap(scanner), uniq)(documents)
