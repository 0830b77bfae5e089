# imagor

A pure-Python library for image-processing endpoint URLs of the form

    /<hash or unsafe>/meta/trim/AxB:CxD/fit-in/stretch/-WxH/PxQ/left/top/smart/filters:name(args):.../image

It parses such paths into structured parameters and generates them back,
signs them with HMAC, derives storage keys from them, normalises image paths
into file-friendly keys, and decides which remote image URLs may be fetched
and with which request headers. It has no dependencies beyond the standard
library.

## Installation

    pip install .

## Parameters

`imagor.params.Params` is a dataclass holding every part of an endpoint
path: `path`, `image`, `unsafe`, `hash`, `meta`, `trim`, `trim_by`,
`trim_tolerance`, the four `crop_*` values, `fit_in`, `stretch`, `width`,
`height`, the four `padding_*` values, `h_flip`, `v_flip`, `h_align`,
`v_align`, `smart` and `filters` (a list of `imagor.params.Filter`, each
with a `name` and an `args` string). The `params` flag is set when the path
begins with `params/`.

`Params.to_dict()` gives the JSON view, leaving out empty fields and the
`params` flag; `Params.to_json(indent=None)` serialises it, compact unless
an indent is given, with `<`, `>` and `&` escaped as `\u003c`-style
sequences.

## Parsing and generating paths

```python
from imagor.parse import parse
from imagor.generate import generate_path, generate_unsafe, generate
from imagor.signer import default_signer

params = parse("unsafe/fit-in/300x200/filters:grayscale()/example.com/cat.jpg")
params.unsafe                      # True
params.width, params.height        # (300, 200)
params.fit_in                      # True
params.filters                     # [Filter(name='grayscale', args='')]
params.image                       # 'example.com/cat.jpg'

generate_path(params)              # 'fit-in/300x200/filters:grayscale()/example.com/cat.jpg'
generate_unsafe(params)            # 'unsafe/fit-in/300x200/filters:grayscale()/example.com/cat.jpg'

signer = default_signer("secret")
generate(params, signer)           # '<signature>/fit-in/300x200/filters:grayscale()/example.com/cat.jpg'
```

- `parse(path)` returns new `Params`; `apply(params, path)` returns a copy
  of existing parameters with the path laid over them (filters are appended).
- Negative dimensions in a path (`-300x-200`) set `h_flip` / `v_flip` and
  keep the width and height positive; `generate_path` turns negative widths
  or heights back into flips.
- Images that contain `?` or begin with a keyword such as `trim/` or
  `fit-in/` are query-escaped by `generate_path`, and unescaped by `parse`.
- `parse_filters(text)` splits a `filters:` segment, nested parentheses
  included, into a list of filters and the trailing image path.

## Signing

`imagor.signer.HMACSigner(secret, truncate=0, digestmod="sha1")` signs a
path with HMAC over any `hashlib` algorithm name or constructor and returns
the URL-safe base64 signature, cut to `truncate` characters when that is
positive and shorter. `default_signer(secret)` is HMAC-SHA1 without
truncation.

## Storage keys

`imagor.hasher` maps an image or a set of parameters to a storage key. The
result hashers use `params.path`, or the generated path when it is empty.

- `digest_storage_hasher(image)`: `ab/cd/<rest of the SHA-1 hex digest>`
- `digest_result_storage_hasher(params)`: the same, over the path
- `suffix_result_storage_hasher(params)`: `image.<20 hex digits>.ext`
- `size_suffix_result_storage_hasher(params)`: `image.<20 hex digits>_WxH.ext`

The extension becomes `.json` when `meta` is set, or the argument of the
last `format(...)` filter.

## Path normalisation

`imagor.normalize.normalize(image, safe_chars=None)` cleans the path, removes
line-break characters, strips leading and trailing slashes and
percent-escapes every byte other than letters, digits, `/ - _ . ~` and any
extra safe characters; spaces become `+`. Extra safe characters come from
`new_safe_chars("...")`; `new_safe_chars("--")` or `SafeChars.noop()`
turns escaping off. `clean_breaks(text)` and `escape(text, should_escape)`
are available on their own.

## HTTP source policy

- `imagor.sources.AllowedSource` matches a URL by host glob
  (`AllowedSource.from_host_pattern("*.example.com")`) or by regular
  expression over the whole URL (`AllowedSource.from_regexp(...)`).
  `is_url_allowed(url, sources)` is true when no sources are given or one
  matches. `parse_content_type` and `validate_content_type(content_type,
  accepts)` check a Content-Type against accepted globs such as `image/*`.
  `random_proxy(proxy_urls, hosts)` returns a function that picks a random
  proxy from a comma separated list for URLs whose host matches one of the
  comma separated host globs (any host when none are given), or `None`.
- `imagor.netguard.NetworkGuard(block_loopback, block_link_local,
  block_private, block_networks)` checks a `host:port` address and raises
  `UnauthorizedRequest` when it falls in a blocked network.
- `imagor.httpconfig.HTTPLoaderConfig` collects loader settings: forwarded,
  overridden and kept response headers, allowed sources, the Accept value,
  maximum size, default scheme (`"nil"` disables it), base URL, user agent
  and a `NetworkGuard`. `resolve_url(image)` turns an image key into the
  URL to request, raising `InvalidSource` or `SourceNotAllowed`;
  `request_headers(client_headers)` builds the outgoing request headers;
  `accepts()` lists the accepted media type globs.

## What this package does not do

It does not fetch images over the network, process or resize images, store
them anywhere, or serve HTTP requests. `HTTPLoaderConfig` and `NetworkGuard`
decide what may be requested, but making the request, enforcing
`max_allowed_size` and applying the guard at connection time is left to the
caller. There is no command-line program.

## Running the tests

    pip install .[test]
    pytest