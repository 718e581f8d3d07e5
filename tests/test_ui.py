import json
import pytest
from foldnotes.fs import Path
from foldnotes.ui import foldnotes_ui
from .conftest import build_file, build_dir, WIKIPEDIA_REDUCE

def test_foldnotes_init(tmp, capsys):
    r = foldnotes_ui(['init'], tmp)
    captured = capsys.readouterr()
    assert r == 0
    assert captured.out == "Store created %s using assets %s\n" % (tmp, tmp)
    assert Path(".foldnotes/keys", tmp).isdir()

def test_foldnotes_init_assets(tmp, capsys):
    r = foldnotes_ui(['init', '--assets=images', 'blog'], tmp)
    captured = capsys.readouterr()
    assert r == 0
    blog = tmp.join("blog")
    assert captured.out == "Store created %s using assets %s\n" % (blog, tmp.join("images"))
    assert Path(".foldnotes/keys", blog).isdir()

def test_foldnotes_no_store(tmp):
    with pytest.raises(ValueError):
        foldnotes_ui(['list'], tmp)

def test_foldnotes_list(corpus, capsys):
    r = foldnotes_ui(['list'], corpus)
    captured = capsys.readouterr()
    assert r == 0
    assert captured.out == "drafts/inject\nreduce\n"
    assert captured.err == ""
    # Works from inside the store too.
    r = foldnotes_ui(['list', '--json'], corpus.join("drafts"))
    captured = capsys.readouterr()
    assert r == 0
    assert json.loads(captured.out) == ["drafts/inject", "reduce"]

def test_foldnotes_list_empty(store, capsys):
    r = foldnotes_ui(['list'], store)
    captured = capsys.readouterr()
    assert r == 0
    assert captured.out == ""

def test_foldnotes_show(corpus, capsys):
    r = foldnotes_ui(['show', 'reduce'], corpus)
    captured = capsys.readouterr()
    assert r == 0
    lines = captured.out.split("\n")
    assert lines[0] == "Reduce, Inject, Fold"
    assert "![uneasy](./uneasy.jpg)" in lines
    assert "[Wikipedia Reduce]: " + WIKIPEDIA_REDUCE in lines

def test_foldnotes_show_json(corpus, capsys):
    r = foldnotes_ui(['show', '--json', 'reduce'], corpus)
    captured = capsys.readouterr()
    assert r == 0
    doc = json.loads(captured.out)
    assert doc['id'] == "reduce"
    assert doc['title'] == "Reduce, Inject, Fold"
    assert doc['links'] == {"Wikipedia Reduce": WIKIPEDIA_REDUCE}
    assert doc['assets'] == ["./uneasy.jpg"]
    assert [b['kind'] for b in doc['body']] == ["heading", "paragraph", "paragraph", "code", "paragraph", "definition"]

def test_foldnotes_show_missing(corpus, capsys):
    r = foldnotes_ui(['show', 'nope'], corpus)
    captured = capsys.readouterr()
    assert r == 1
    assert captured.out == ""
    assert captured.err == "Document not found: nope\n"

def test_foldnotes_links(corpus, capsys):
    r = foldnotes_ui(['links', 'reduce'], corpus)
    captured = capsys.readouterr()
    assert r == 0
    assert captured.out == "Wikipedia Reduce\t%s\n" % WIKIPEDIA_REDUCE
    r = foldnotes_ui(['links', 'reduce', 'wikipedia reduce'], corpus)
    captured = capsys.readouterr()
    assert r == 0
    assert captured.out == WIKIPEDIA_REDUCE + "\n"
    r = foldnotes_ui(['links', 'reduce', 'Wikipedia Inject'], corpus)
    captured = capsys.readouterr()
    assert r == 1
    assert captured.out == ""

def test_foldnotes_assets(corpus, capsys):
    r = foldnotes_ui(['assets'], corpus)
    captured = capsys.readouterr()
    assert r == 0
    assert captured.out == "reduce\t./uneasy.jpg\tuneasy.jpg\n"
    r = foldnotes_ui(['assets', '--missing'], corpus)
    captured = capsys.readouterr()
    assert r == 4
    assert captured.out == "reduce\t./uneasy.jpg\tuneasy.jpg\n"
    build_file(corpus, 'uneasy.jpg', b'\xff\xd8', mode='wb')
    r = foldnotes_ui(['assets', '--missing'], corpus)
    captured = capsys.readouterr()
    assert r == 0
    assert captured.out == ""

def test_foldnotes_assets_relative(corpus, capsys):
    drafts = corpus.join("drafts")
    r = foldnotes_ui(['assets', 'reduce', 'drafts/inject'], drafts)
    captured = capsys.readouterr()
    assert r == 0
    assert captured.out == "reduce\t./uneasy.jpg\t../uneasy.jpg\n"

def test_foldnotes_fsck_clean(corpus, capsys):
    build_file(corpus, 'uneasy.jpg', b'\xff\xd8', mode='wb')
    r = foldnotes_ui(['fsck', '--quiet'], corpus)
    captured = capsys.readouterr()
    assert r == 0
    assert captured.out == ""
    assert captured.err == ""

def test_foldnotes_fsck_defects(store, capsys):
    build_file(store, 'broken.md', u"See [Nowhere].\n\n![gone](gone.png)\n")
    r = foldnotes_ui(['fsck', '--quiet'], store)
    captured = capsys.readouterr()
    assert r == 1 | 4
    assert captured.out == "broken:1\tbroken-link\tNowhere\nbroken:3\tmissing-asset\tgone.png\n"
    r = foldnotes_ui(['fsck', '--quiet', '--links'], store)
    captured = capsys.readouterr()
    assert r == 1
    assert captured.out == "broken:1\tbroken-link\tNowhere\n"
    r = foldnotes_ui(['fsck', '--quiet', '--undeclared'], store)
    captured = capsys.readouterr()
    assert r == 0
    assert captured.out == ""

def test_foldnotes_fsck_duplicates_and_unused(store, capsys):
    build_file(store, 'u.md', u"See [a].\n\n[a]: http://a\n[A]: http://again\n[b]: http://b\n")
    r = foldnotes_ui(['fsck', '--quiet'], store)
    captured = capsys.readouterr()
    assert r == 8
    assert captured.out == "u:4\tduplicate-label\tA\n"
    r = foldnotes_ui(['fsck', '--quiet', '--unused'], store)
    captured = capsys.readouterr()
    assert r == 16
    assert captured.out == "u:5\tunused-link\tb\n"
    r = foldnotes_ui(['fsck', '--quiet', '--duplicates', '--unused'], store)
    captured = capsys.readouterr()
    assert r == 8 | 16

def test_foldnotes_fsck_ignored(store, capsys):
    build_dir(store, 'drafts')
    build_file(store, 'drafts/broken.md', u"[Nowhere]\n")
    build_file(store, '.foldignore', u"drafts\n")
    r = foldnotes_ui(['fsck', '--quiet'], store)
    captured = capsys.readouterr()
    assert r == 0
    assert captured.out == ""

def test_foldnotes_fsck_commonmark_definitions(store, capsys):
    build_file(store, 'quoted.md', u"> See [fold].\n>\n> [fold]: http://f\n")
    build_file(store, 'wrapped.md', u"See [fold].\n\n[fold]:\n  http://f\n")
    r = foldnotes_ui(['fsck', '--quiet'], store)
    captured = capsys.readouterr()
    assert r == 0
    assert captured.out == ""

def test_foldnotes_show_then_assets(corpus, capsys):
    r = foldnotes_ui(['show', 'drafts/inject'], corpus)
    captured = capsys.readouterr()
    assert r == 0
    assert captured.out.split("\n")[0] == "Inject"
    r = foldnotes_ui(['assets', 'drafts/inject'], corpus)
    captured = capsys.readouterr()
    assert r == 0
    assert captured.out == ""
