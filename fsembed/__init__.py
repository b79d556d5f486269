"""
fsembed: embed directory trees into Python source.

Packing walks one or more roots, compresses and base64-encodes every file,
and writes a Python module declaring the tree as literal data. At run time
that module instantiates a read-only virtual filesystem which decodes each
file lazily on first access.

Usage:
    # Pack time
    from fsembed.pack import pack
    from fsembed.config import get_pack_config

    pack(get_pack_config(files=["./static"], out="myapp/assets.py"))

    # Run time
    from myapp.assets import Assets

    with Assets.open("/index.html") as handle:
        html = handle.read()
"""

__version__ = "0.1.0"

# Version of the data schema emitted by the generator and accepted by
# fsembed.runtime.Fs. Bump when the File literal shape changes.
FORMAT_VERSION = 1

__all__ = ["FORMAT_VERSION", "__version__"]
