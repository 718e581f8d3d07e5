from foldnotes import getstore
from foldnotes import cwd
from docopt import docopt
from foldnotes.util import \
    bitor,         \
    concatMap,     \
    consume,       \
    count,         \
    empty_default, \
    ffilter,       \
    fmap,          \
    identify,      \
    identity,      \
    pipeline,      \
    reduceWith,    \
    uncurry,       \
    zipFrom
from foldnotes.check import \
    broken_links,      \
    check_documents,   \
    duplicate_labels,  \
    missing_assets,    \
    undeclared_assets, \
    unused_links
from foldnotes.fs import userPath2Path
from foldnotes.store import init, NotFoundError
from json import JSONEncoder
from tqdm import tqdm
import sys

json_encoder = JSONEncoder(ensure_ascii=False, sort_keys=True)
json_encode = lambda data: json_encoder.encode(data)
json_printr = pipeline(list, json_encode, print)
strs_printr = pipeline(fmap(print), consume)

UI_USAGE = """
FoldNotes

Usage:
  foldnotes init [--assets=<dir>] [<root>]
  foldnotes list [--json]
  foldnotes show [--json] <doc>
  foldnotes links <doc> [<label>]
  foldnotes assets [--missing] [<docs>...]
  foldnotes fsck [--links --undeclared --missing --duplicates --unused] [--quiet]

Options:
  --assets=<dir>  Directory holding the images the documents refer to.
  --json          Print machine readable output.
  --missing       Only report assets which are not in the asset store.
  --quiet         Don't draw progress bars.
"""

def fsck_scanners(store):
    """Scanner flag -> (scanner, fail code). Ordered as they run."""
    return [
        ('--links', (broken_links, 1)),
        ('--undeclared', (undeclared_assets, 2)),
        ('--missing', (missing_assets(store.assets), 4)),
        ('--duplicates', (duplicate_labels, 8)),
        ('--unused', (unused_links, 16)),
    ]

DEFAULT_OFF = ['--unused']

def fsck(store, scanner, fail_code, quiet=False):
    """Prints the defects scanner finds in store. Returns fail_code when there were any."""
    ids = store.list()
    with tqdm(desc="Checking", total=len(ids), disable=quiet, leave=False, delay=1) as pbar:
        def tick(doc):
            pbar.update(1)
        documents = pipeline(fmap(store.get), fmap(identify(tick)))(ids)
        defects = pipeline(
            fmap(identify(print)),
            count)(check_documents(scanner, documents))
    return fail_code if defects > 0 else 0

def ui_main():
    result = foldnotes_ui(sys.argv[1:], cwd)
    exit(result)

def foldnotes_ui(argv, cwd):
    args = docopt(UI_USAGE, argv)
    try:
        return _foldnotes_ui(args, cwd)
    except NotFoundError as e:
        print(e, file=sys.stderr)
        return 1

def _foldnotes_ui(args, cwd):
    exitcode = 0
    if args['init']:
        root = userPath2Path(args['<root>'] or ".", cwd)
        assets = userPath2Path(args['--assets'], cwd) if args['--assets'] else None
        store = init(root, assets)
        print("Store created %s using assets %s" % (store.root, store.assets.root))
        return exitcode
    store = getstore(cwd)
    if args['list']:
        printr = json_printr if args['--json'] else strs_printr
        printr(store.list())
    elif args['show']:
        doc = store.get(args['<doc>'])
        if args['--json']:
            print(json_encode(doc.get_dict()))
        else:
            print(doc.title)
            for block in doc.body:
                print()
                print(block.text)
    elif args['links']:
        doc = store.get(args['<doc>'])
        label = args['<label>']
        if label is not None:
            url = doc.resolve(label)
            if url is None:
                exitcode = 1
            else:
                print(url)
        else:
            for name in sorted(doc.links):
                print(name, doc.links[name], sep="\t")
    elif args['assets']:
        ids = empty_default(args['<docs>'], store.list())
        is_missing = uncurry(lambda doc, path: not store.assets.exists(doc.id, path))
        def asset_printr(doc_path):
            (doc, path) = doc_path
            print(doc.id, path, store.assets.asset_path(doc.id, path).relative_to(cwd), sep="\t")
        selected = pipeline(
            fmap(store.get),
            concatMap(lambda doc: zipFrom(doc, sorted(doc.assets))),
            ffilter(is_missing) if args['--missing'] else fmap(identity),
            fmap(identify(asset_printr)),
            count)(ids)
        if args['--missing'] and selected > 0:
            exitcode = 4
    elif args['fsck']:
        scanners = fsck_scanners(store)
        tasks = [task for (flag, task) in scanners if args[flag]]
        if len(tasks) == 0:
            # No scanners named, run the default suite.
            tasks = [task for (flag, task) in scanners if flag not in DEFAULT_OFF]
        quiet = args['--quiet']
        codes = [fsck(store, scanner, fail_code, quiet) for (scanner, fail_code) in tasks]
        exitcode = reduceWith(bitor, exitcode, codes)
    return exitcode
