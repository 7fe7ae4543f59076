import os
from pathlib import Path

import pytest

from domain import audio_extension
from domain.audio_extension import (
    ensure_extension_on_path,
    extension_from_filename,
    extension_from_mime,
    mime_type_for_path,
    readable_audio,
    resolve_extension,
)
from domain.models import UploadedAudio


def _upload(tmp_path: Path, filename=None, content_type=None, data=b"audio") -> UploadedAudio:
    path = tmp_path / "upload_abc123"
    path.write_bytes(data)
    return UploadedAudio(
        path=path,
        original_filename=filename,
        content_type=content_type,
        size=len(data),
    )


def test_extension_from_filename_is_case_insensitive() -> None:
    assert extension_from_filename("voice.MP3") == "mp3"
    assert extension_from_filename("session.2024.m4a") == "m4a"
    assert extension_from_filename("no_extension") == ""
    assert extension_from_filename("weird.mp-3") == ""
    assert extension_from_filename(None) == ""


def test_extension_from_mime_handles_aliases_and_parameters() -> None:
    assert extension_from_mime("audio/x-wav") == "wav"
    assert extension_from_mime("AUDIO/MPEG") == "mp3"
    assert extension_from_mime("audio/webm;codecs=opus") == "webm"
    assert extension_from_mime("video/quicktime") == ""
    assert extension_from_mime(None) == ""


def test_resolve_extension_prefers_filename_over_mime(monkeypatch) -> None:
    def fail(_mime):
        raise AssertionError("MIME table should not be consulted")

    monkeypatch.setattr(audio_extension, "extension_from_mime", fail)

    assert resolve_extension("voice.MP3", "audio/ogg") == "mp3"


def test_ensure_extension_renames_without_leaving_duplicate(tmp_path: Path) -> None:
    audio = _upload(tmp_path, filename="voice.MP3", content_type="audio/ogg")

    resolved = ensure_extension_on_path(audio)

    assert resolved == Path(f"{audio.path}.mp3")
    assert resolved.read_bytes() == b"audio"
    assert os.listdir(tmp_path) == [resolved.name]


def test_ensure_extension_uses_mime_when_filename_has_none(tmp_path: Path) -> None:
    audio = _upload(tmp_path, filename="blob", content_type="audio/webm;codecs=opus")

    resolved = ensure_extension_on_path(audio)

    assert resolved.suffix == ".webm"
    assert not audio.path.exists()


def test_ensure_extension_without_hint_keeps_raw_path(tmp_path: Path) -> None:
    audio = _upload(tmp_path)

    assert ensure_extension_on_path(audio) == audio.path
    assert audio.path.exists()


def test_ensure_extension_skips_rename_when_path_already_matches(tmp_path: Path) -> None:
    path = tmp_path / "upload.WAV"
    path.write_bytes(b"riff")
    audio = UploadedAudio(path=path, original_filename="take.wav", size=4)

    assert ensure_extension_on_path(audio) == path
    assert os.listdir(tmp_path) == ["upload.WAV"]


def test_ensure_extension_falls_back_to_copy_when_rename_fails(
    tmp_path: Path, monkeypatch
) -> None:
    audio = _upload(tmp_path, filename="voice.flac")

    def cross_device(src, dst):
        raise OSError(18, "Invalid cross-device link")

    monkeypatch.setattr(audio_extension.os, "rename", cross_device)

    resolved = ensure_extension_on_path(audio)

    assert resolved.suffix == ".flac"
    assert resolved.read_bytes() == b"audio"
    assert not audio.path.exists()


def test_readable_audio_deletes_file_when_body_fails(tmp_path: Path) -> None:
    audio = _upload(tmp_path, filename="voice.mp3")

    with pytest.raises(RuntimeError):
        with readable_audio(audio) as path:
            assert path.exists()
            raise RuntimeError("transcription blew up")

    assert os.listdir(tmp_path) == []


def test_readable_audio_deletes_file_after_success(tmp_path: Path) -> None:
    audio = _upload(tmp_path, content_type="audio/aac")

    with readable_audio(audio) as path:
        assert path.suffix == ".aac"

    assert os.listdir(tmp_path) == []


def test_mime_type_for_path() -> None:
    assert mime_type_for_path("/tmp/upload.mp3") == "audio/mpeg"
    assert mime_type_for_path("/tmp/upload.M4A") == "audio/mp4"
    assert mime_type_for_path("/tmp/upload") is None


def test_mime_type_for_path_covers_extra_audio_containers() -> None:
    assert mime_type_for_path("/tmp/upload_x.mp4") == "audio/mp4"
    assert mime_type_for_path("/tmp/upload_x.mpga") == "audio/mpeg"
    assert mime_type_for_path("/tmp/upload_x.opus") == "audio/ogg"
    assert mime_type_for_path("/tmp/upload_x.oga") == "audio/ogg"


def test_mime_type_for_path_falls_back_to_declared_type() -> None:
    assert mime_type_for_path("/tmp/upload_x.zzaudio", "audio/AMR; rate=8000") == "audio/amr"
    assert mime_type_for_path("/tmp/upload_x", "audio/3gpp") == "audio/3gpp"
