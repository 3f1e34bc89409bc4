"""
Tests for imagepipe-reader
"""

import pytest
import sys
import io
import json
import base64
import tempfile

from os.path import abspath, dirname, join

sys.path.append(dirname(dirname(dirname(abspath(__file__)))))

from imagepipe.reader import get_parser,run_reader
from imagepipe.errors import DecodeError,SourceFetchError
from images import encoded,write_image

def read(argv, stdin=b""):
    out = io.BytesIO()
    code = run_reader(get_parser().parse_args(argv), io.BytesIO(stdin), out)
    return (code, out.getvalue())

def test_reads_jpeg():
    with tempfile.TemporaryDirectory() as td:
        path = write_image(join(td, "photo.jpg"), 100, 50)
        (code, out) = read([path])
    assert code == 0
    assert out.endswith(b"\n")
    assert out.count(b"\n") == 1
    d = json.loads(out)
    assert d['@type'] == 'Image'
    assert (d['width'], d['height']) == (100, 50)
    assert d['format'] == 'image/jpeg'
    assert d['source'] == "file:" + abspath(path)
    assert len(base64.b64decode(d['data'])) == 100*50*3

def test_reads_and_resizes():
    with tempfile.TemporaryDirectory() as td:
        path = write_image(join(td, "photo.jpg"), 100, 50)
        (code, out) = read(["--size", "50x25", path])
    assert code == 0
    d = json.loads(out)
    assert (d['width'], d['height']) == (50, 25)
    assert len(base64.b64decode(d['data'])) == 50*25*d['channels']
    assert d['history'][-1] == ['resize', [50, 25]]

def test_resize_is_deterministic():
    with tempfile.TemporaryDirectory() as td:
        path = write_image(join(td, "photo.png"), 64, 48)
        outs = [read(["-s", "31x17", path])[1] for _ in range(2)]
    assert outs[0] == outs[1]

def test_reads_stdin():
    (code, out) = read([], stdin=encoded(12, 7, '.png', channels=4))
    assert code == 0
    d = json.loads(out)
    assert (d['width'], d['height'], d['channels']) == (12, 7, 4)
    assert d['source'] == '[stdin]'

def test_empty_stdin():
    with pytest.raises(DecodeError) as e:
        read([], stdin=b"")
    assert e.value.exit_code == 65

def test_missing_file():
    with pytest.raises(SourceFetchError) as e:
        read(["/no/such/file.jpg"])
    assert e.value.exit_code == 74
