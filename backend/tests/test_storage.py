import io
import os
import pytest
from werkzeug.datastructures import FileStorage
from broresolve.errors import ValidationError, UpstreamError
from broresolve.services.storage import LocalObjectStorage, read_image_upload, attachment_key, avatar_key


def test_upload_public_url_and_delete(tmp_path):
    storage = LocalObjectStorage(str(tmp_path), '/media')
    key = storage.upload('avatars/7/1.png', b'abc', 'image/png')
    assert key == 'avatars/7/1.png'
    assert (tmp_path / 'avatars' / '7' / '1.png').read_bytes() == b'abc'
    assert storage.public_url(key) == '/media/avatars/7/1.png'
    assert storage.key_from_url('/media/avatars/7/1.png') == key
    assert storage.key_from_url('https://elsewhere/x.png') is None
    # no temp files left behind
    assert os.listdir(tmp_path / 'avatars' / '7') == ['1.png']
    storage.delete(key)
    assert not (tmp_path / 'avatars' / '7' / '1.png').exists()
    # deleting a missing object is a no-op
    storage.delete(key)


@pytest.mark.parametrize('key', ['../escape.png', '/etc/passwd', 'a/../../b.png', ''])
def test_keys_cannot_escape_root(tmp_path, key):
    storage = LocalObjectStorage(str(tmp_path / 'root'))
    with pytest.raises(ValidationError):
        storage.upload(key, b'x')


def test_os_errors_become_upstream(tmp_path):
    (tmp_path / 'blocker').write_text('file, not a directory')
    storage = LocalObjectStorage(str(tmp_path))
    with pytest.raises(UpstreamError):
        storage.upload('blocker/child.png', b'x')


def test_read_image_upload():
    ok = FileStorage(stream=io.BytesIO(b'img'), filename='Photo.JPG', content_type='image/jpeg')
    data, ext, ctype = read_image_upload(ok, 10)
    assert (data, ext, ctype) == (b'img', 'jpg', 'image/jpeg')
    with pytest.raises(ValidationError):
        read_image_upload(None, 10)
    with pytest.raises(ValidationError):
        read_image_upload(FileStorage(stream=io.BytesIO(b'x' * 11), filename='a.png', content_type='image/png'), 10)


def test_key_layout():
    assert attachment_key('png').startswith('tickets/') and attachment_key('png').endswith('.png')
    assert avatar_key(5, 'jpg').startswith('avatars/5/')


def test_is_under_resolves_dot_segments(tmp_path):
    storage = LocalObjectStorage(str(tmp_path))
    assert storage.is_under('avatars/2/1.png', 'avatars/2')
    assert not storage.is_under('avatars/2/../1/1.png', 'avatars/2')
    assert not storage.is_under('avatars/22/1.png', 'avatars/2')
    assert not storage.is_under('avatars/2', 'avatars/2')
    assert not storage.is_under('../outside.png', 'avatars/2')
