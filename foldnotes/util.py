from functools import partial as functools_partial
from collections import defaultdict

rawtype = bytes
safetype = str
raw2str = lambda r: r.decode('utf-8')
str2raw = lambda s: s.encode('utf-8')

def ingest(d):
    """Convert rawtype (bytes) to safetype (str)."""
    if isinstance(d, rawtype):
        return raw2str(d)
    elif isinstance(d, safetype):
        return d
    else:
        raise TypeError("Can't ingest data of type %s" % type(d))

def egest(s):
    """Convert safetype (str) to rawtype (bytes)."""
    if isinstance(s, rawtype):
        return s
    elif isinstance(s, safetype):
        return str2raw(s)
    else:
        raise TypeError("Can't egest data of type %s" % type(s))

def empty_default(xs, default):
    """
    If zero length array is passed, returns default.
    Otherwise returns the origional array.
    """
    xs = list(xs)
    if len(xs) == 0:
        return list(default)
    else:
        return xs

def compose(f, g):
    fn = lambda *args, **kwargs: f(g(*args, **kwargs))
    fn.__name__ = f.__name__ + "_" + g.__name__
    return fn

def partial(fn, *args, **kwargs):
    out = functools_partial(fn, *args, **kwargs)
    out.__name__ = "partial_" + fn.__name__
    return out

def concat(ls):
    for sublist in ls:
        for item in sublist:
            yield item

def concatMap(func):
    return compose(concat, partial(map, func))

def fmap(func):
    def mapped(collection):
        return map(func, collection)
    mapped.__name__ = "mapped_" + getattr(func, '__name__', 'fn')
    return mapped

def ffilter(func):
    def filtered(collection):
        return filter(func, collection)
    return filtered

def identity(x):
    return x

def groupby(func, ls):
    """Groups ls by func, keeping first-seen order of the keys."""
    groups = defaultdict(list)
    for i in ls:
        groups[func(i)].append(i)
    return list(groups.items())

def consume(collection):
    for _ in collection:
        pass

def uniq(ls):
    seen = set()
    for i in ls:
        if i in seen:
            continue
        seen.add(i)
        yield i

def count(iterator):
    c = 0
    for _ in iterator:
        c += 1
    return c

def uncurry(func):
    """Wraps func so that the first arg is expanded into list args."""
    def uncurried(list_args, **kwargs):
        return func(*list_args, **kwargs)
    return uncurried

def identify(func):
    """Wrap func so that it returns what comes in."""
    def identified(arg):
        func(arg)
        return arg
    return identified

def pipeline(*funcs):
    if funcs:
        foo = funcs[0]
        rest = funcs[1:]
        if rest:
            next_hop = pipeline(*rest)
            def pipe(*args, **kwargs):
                return next_hop(foo(*args, **kwargs))
            return pipe
        else:  # no rest, foo is final function.
            return foo
    else:  # no funcs at all.
        return fmap(identity)

def zipFrom(a, bs):
    """Converts a value and list into a list of tuples: a -> [b] -> [(a,b)]"""
    for b in bs:
        yield (a, b)

def nth(n):
    def nth_getter(lst):
        return lst[n]
    return nth_getter


first = nth(0)
second = nth(1)

def reduceWith(reducer, seed, iterable):
    """
    Computes a left fold of iterable with reducer, starting from seed.
    reducer is (b -> a -> b), seed is b, iterable is [a].
    """
    accumulation = seed
    for value in iterable:
        accumulation = reducer(accumulation, value)
    return accumulation

def bitor(acc, val):
    return acc | val
