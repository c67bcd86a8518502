import pytest

from conftest import FakeDriveService, FakeMediaRequest
from organizer.downloader import VideoDownloader
from organizer.drive_lister import RemoteVideoRef
from organizer.errors import DownloadError


def test_downloads_to_video_dir(settings):
    drive = FakeDriveService(media={'id-1': FakeMediaRequest([b'abc', b'def'])})
    downloader = VideoDownloader(drive, settings.video_dir, show_progress=False)

    path = downloader.download(RemoteVideoRef('id-1', 'clip1.mp4'))

    assert path == settings.video_dir / 'clip1.mp4'
    assert path.read_bytes() == b'abcdef'
    assert drive.files().get_media_calls == ['id-1']


def test_existing_file_returns_skip_signal_without_remote_call(settings):
    (settings.video_dir / 'clip1.mp4').write_bytes(b'old')
    drive = FakeDriveService()
    downloader = VideoDownloader(drive, settings.video_dir, show_progress=False)

    assert downloader.download(RemoteVideoRef('id-1', 'clip1.mp4')) is None
    assert drive.files().get_media_calls == []
    assert (settings.video_dir / 'clip1.mp4').read_bytes() == b'old'


def test_force_overwrites_existing_file(settings):
    (settings.video_dir / 'clip1.mp4').write_bytes(b'trunc')
    drive = FakeDriveService(media={'id-1': FakeMediaRequest([b'complete'])})
    downloader = VideoDownloader(drive, settings.video_dir, show_progress=False)

    path = downloader.download(RemoteVideoRef('id-1', 'clip1.mp4'), force=True)

    assert path.read_bytes() == b'complete'


def test_failed_transfer_leaves_truncated_file(settings):
    drive = FakeDriveService(media={'id-1': FakeMediaRequest([b'part', b'rest'], fail_after=1)})
    downloader = VideoDownloader(drive, settings.video_dir, show_progress=False)

    with pytest.raises(DownloadError):
        downloader.download(RemoteVideoRef('id-1', 'clip1.mp4'))

    assert (settings.video_dir / 'clip1.mp4').read_bytes() == b'part'
    # the next attempt mistakes the truncated file for a finished download
    assert downloader.download(RemoteVideoRef('id-1', 'clip1.mp4')) is None


def test_missing_video_dir_is_a_download_error(tmp_path):
    downloader = VideoDownloader(FakeDriveService(), tmp_path / 'missing', show_progress=False)
    with pytest.raises(DownloadError):
        downloader.download(RemoteVideoRef('id-1', 'clip1.mp4'))


def test_absolute_drive_name_stays_in_video_dir(settings, tmp_path):
    outside = tmp_path / 'outside' / 'evil.mp4'
    outside.parent.mkdir()
    downloader = VideoDownloader(FakeDriveService(), settings.video_dir, show_progress=False)

    path = downloader.download(RemoteVideoRef('id-1', str(outside)))

    assert path == settings.video_dir / 'evil.mp4'
    assert not outside.exists()


@pytest.mark.parametrize('name', ['../escaped.mp4', 'nested/dir/escaped.mp4', '..\\escaped.mp4'])
def test_relative_drive_name_cannot_escape(settings, tmp_path, name):
    downloader = VideoDownloader(FakeDriveService(), settings.video_dir, show_progress=False)

    path = downloader.download(RemoteVideoRef('id-1', name))

    assert path == settings.video_dir / 'escaped.mp4'
    assert path.exists()
    assert not (tmp_path / 'escaped.mp4').exists()


def test_unusable_drive_name_raises(settings):
    downloader = VideoDownloader(FakeDriveService(), settings.video_dir, show_progress=False)
    with pytest.raises(DownloadError):
        downloader.download(RemoteVideoRef('id-1', '..'))
