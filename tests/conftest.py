from unittest.mock import Mock

import pytest
from googleapiclient.errors import HttpError

import organizer.downloader as downloader_module
import organizer.transcriber as transcriber_module
from organizer.config import Settings


def make_http_error(status=500, reason="Backend Error"):
    return HttpError(Mock(status=status, reason=reason), b'{"error": {"message": "boom"}}')


class FakeRequest:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error

    def execute(self):
        if self.error is not None:
            raise self.error
        return self.result


class FakeMediaRequest:
    def __init__(self, chunks, fail_after=None):
        self.chunks = list(chunks)
        self.fail_after = fail_after


class FakeMediaDownload:
    """Stands in for MediaIoBaseDownload, writing the request's chunks one by one."""

    def __init__(self, fh, request, chunksize=None):
        self.fh = fh
        self.request = request
        self.remaining = list(request.chunks)
        self.written = 0

    def next_chunk(self):
        if self.request.fail_after is not None and self.written >= self.request.fail_after:
            raise make_http_error(503, "Service Unavailable")
        self.fh.write(self.remaining.pop(0))
        self.written += 1
        return Mock(), not self.remaining


class FakeFiles:
    def __init__(self, pages, media, list_error=None):
        self.pages = pages
        self.media = media
        self.list_error = list_error
        self.list_calls = []
        self.get_media_calls = []

    def list(self, **kwargs):
        self.list_calls.append(kwargs)
        if self.list_error is not None:
            return FakeRequest(error=self.list_error)
        return FakeRequest(self.pages[len(self.list_calls) - 1])

    def get_media(self, fileId):
        self.get_media_calls.append(fileId)
        return self.media.get(fileId) or FakeMediaRequest([b'video-bytes'])


class FakeDriveService:
    def __init__(self, files=None, pages=None, media=None, list_error=None):
        if pages is None:
            pages = [{'files': list(files or [])}]
        self._files = FakeFiles(pages, media or {}, list_error)

    def files(self):
        return self._files


class FakeValues:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def append(self, **kwargs):
        self.calls.append(kwargs)
        return FakeRequest({'updates': {'updatedRows': 1}}, self.error)


class FakeSpreadsheets:
    def __init__(self, values):
        self._values = values

    def values(self):
        return self._values


class FakeSheetsService:
    def __init__(self, error=None):
        self.values_api = FakeValues(error)

    def spreadsheets(self):
        return FakeSpreadsheets(self.values_api)

    @property
    def rows(self):
        return [call['body']['values'][0] for call in self.values_api.calls]


class FakeClients:
    def __init__(self, drive, sheets):
        self.drive = drive
        self.sheets = sheets


class FakeTranscriptionApi:
    """Replaces requests.post; returns one transcript per call, or fails on chosen calls."""

    def __init__(self, texts=None, fail_on=()):
        self.texts = texts or {}
        self.fail_on = set(fail_on)
        self.calls = []

    def __call__(self, url, headers=None, data=None, files=None, timeout=None):
        file_name = files['file'][0]
        self.calls.append({'url': url, 'headers': headers, 'data': data, 'file_name': file_name})
        if len(self.calls) in self.fail_on:
            return Mock(status_code=500, text='server error',
                        json=lambda: {'error': {'message': 'server error'}})
        text = self.texts.get(file_name, f"transcript of {file_name}")
        return Mock(status_code=200, json=lambda: {'text': text})


@pytest.fixture(autouse=True)
def fake_media_download(monkeypatch):
    monkeypatch.setattr(downloader_module, 'MediaIoBaseDownload', FakeMediaDownload)


@pytest.fixture
def transcription_api(monkeypatch):
    api = FakeTranscriptionApi()
    monkeypatch.setattr(transcriber_module.requests, 'post', api)
    return api


@pytest.fixture
def settings(tmp_path):
    s = Settings(
        folder_id='folder-123',
        spreadsheet_id='sheet-456',
        openai_api_key='sk-test',
        video_dir=tmp_path / 'videos',
        transcript_dir=tmp_path / 'transcripts',
        state_dir=tmp_path / 'state',
    )
    s.ensure_directories()
    return s
