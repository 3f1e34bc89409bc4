"""
Tests for the sources: a single frame from a file or stdin, the tee and the record stream
"""

import pytest
import sys
import io
import tempfile

from os.path import abspath, dirname, join

sys.path.append(dirname(dirname(dirname(abspath(__file__)))))

from imagepipe.frame import Frame,encode_record
from imagepipe.source import FrameFromSource,TeeLines,FrameRecordStream
from imagepipe.errors import DecodeError,MalformedRecord,SourceFetchError
from images import gradient,encoded,write_image

def records(*sizes):
    return [encode_record(Frame(img=gradient(w, h))).encode('utf-8') for (w,h) in sizes]

def test_frame_from_file():
    with tempfile.TemporaryDirectory() as td:
        path = write_image(join(td, "a.jpg"), 100, 50)
        f = FrameFromSource(path)
        assert f.shape == (50, 100, 3)
        assert f.urn == "file:" + abspath(path)
        assert f.mime_type == 'image/jpeg'

def test_misnamed_file_is_sniffed():
    with tempfile.TemporaryDirectory() as td:
        path = join(td, "really_a_png.jpg")
        with open(path,"wb") as f:
            f.write(encoded(8, 4, '.png'))
        f = FrameFromSource(path)
        assert f.mime_type == 'image/png'
        assert f.shape == (4, 8, 3)

def test_frame_from_stdin():
    f = FrameFromSource(None, stdin=io.BytesIO(encoded(8, 4, '.bmp')))
    assert f.urn == '[stdin]'
    assert f.shape == (4, 8, 3)

def test_frame_from_source_errors():
    with pytest.raises(DecodeError):
        FrameFromSource(None, stdin=io.BytesIO(b""))
    with pytest.raises(SourceFetchError):
        FrameFromSource("/no/such/file.png")

def test_tee_copies_after_consumer():
    out = io.BytesIO()
    lines = TeeLines(io.BytesIO(b"one\ntwo\n"), out)
    assert next(lines) == b"one\n"
    assert out.getvalue() == b""          # not yet, the consumer is still working on it
    assert next(lines) == b"two\n"
    assert out.getvalue() == b"one\n"
    with pytest.raises(StopIteration):
        next(lines)
    assert out.getvalue() == b"one\ntwo\n"

def test_tee_partial_last_line():
    data = b"one\n\ntwo\nthree"
    out = io.BytesIO()
    assert list(TeeLines(io.BytesIO(data), out)) == [b"one\n", b"\n", b"two\n", b"three"]
    assert out.getvalue() == data

def test_tee_close_copies_current_line():
    out = io.BytesIO()
    lines = TeeLines(io.BytesIO(b"one\ntwo\nthree\n"), out)
    next(lines)
    next(lines)
    lines.close()
    assert out.getvalue() == b"one\ntwo\n"

def test_no_tee():
    assert list(TeeLines(io.BytesIO(b"a\nb\n"))) == [b"a\n", b"b\n"]

def test_record_stream():
    lines = records((3,2), (4,1), (1,1))
    frames = list(FrameRecordStream(lines))
    assert [f.shape for f in frames] == [(2,3,3), (1,4,3), (1,1,3)]

def test_record_stream_skips_malformed():
    good = records((3,2), (4,1), (5,5))
    lines = [good[0], b"{not json\n", b"\n", good[1], b'{"@type":"Image","width":1}\n', good[2]]
    errors = []
    frames = list(FrameRecordStream(lines, on_error=lambda msg, err: errors.append((msg, err))))
    assert [f.width for f in frames] == [3, 4, 5]
    assert len(errors) == 2
    assert errors[0][0].startswith("line 2:")
    assert errors[1][0].startswith("line 5:")
    assert all(isinstance(err, MalformedRecord) for (msg, err) in errors)

def test_record_stream_without_handler_raises():
    with pytest.raises(MalformedRecord):
        list(FrameRecordStream([b"garbage\n"]))

def test_record_stream_unterminated_last_line():
    line = records((2,2))[0].rstrip(b"\n")
    frames = list(FrameRecordStream(TeeLines(io.BytesIO(line))))
    assert len(frames) == 1
