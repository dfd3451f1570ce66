import io

import pytest
from fastapi import UploadFile

from studyaid.exceptions import ValidationFailure
from studyaid.schemas.lecture import SelectedFile
from studyaid.utils.uploads import (
    EMPTY_SELECTION_MESSAGE,
    INVALID_TYPE_MESSAGE,
    FileSelection,
    describe_uploads,
)

MB = 1024 * 1024


def pdf(name='notes.pdf', size=MB):
    return SelectedFile(filename=name, content_type='application/pdf', size=size)


def test_accepts_valid_selection():
    selection = FileSelection()
    files = [pdf('a.pdf'), SelectedFile(filename='b.txt', content_type='text/plain', size=10)]
    assert selection.select(files) is True
    assert selection.files == files
    assert selection.error is None


def test_too_many_files_rejects_whole_selection():
    selection = FileSelection()
    previous = [pdf('keep.pdf')]
    selection.select(previous)

    assert selection.select([pdf(f'{i}.pdf') for i in range(6)]) is False
    assert selection.error == 'Maximum 5 files allowed'
    assert selection.files == previous


def test_oversized_file_rejected():
    selection = FileSelection()
    assert selection.select([pdf(size=10 * MB + 1)]) is False
    assert selection.error == 'Files must be under 10MB'
    assert selection.files == []


def test_type_is_checked_before_count_and_size():
    selection = FileSelection()
    files = [pdf(f'{i}.pdf', size=20 * MB) for i in range(6)]
    files.append(SelectedFile(filename='x.png', content_type='image/png', size=1))
    selection.select(files)
    assert selection.error == INVALID_TYPE_MESSAGE


def test_count_is_checked_before_size():
    selection = FileSelection()
    selection.select([pdf(f'{i}.pdf', size=20 * MB) for i in range(6)])
    assert selection.error == 'Maximum 5 files allowed'


def test_accepted_selection_clears_previous_error():
    selection = FileSelection()
    selection.select([pdf(size=11 * MB)])
    assert selection.error
    selection.select([pdf()])
    assert selection.error is None


def test_require_rejects_empty_selection():
    selection = FileSelection()
    with pytest.raises(ValidationFailure) as exc:
        selection.require([])
    assert exc.value.message == EMPTY_SELECTION_MESSAGE


def test_require_raises_selection_error():
    with pytest.raises(ValidationFailure) as exc:
        FileSelection(max_files=2).require([pdf(), pdf(), pdf()])
    assert exc.value.message == 'Maximum 2 files allowed'


def test_describe_uploads_measures_stream_when_size_unknown():
    upload = UploadFile(file=io.BytesIO(b'hello world'), filename='notes.txt')
    described = describe_uploads([upload])
    assert described[0].filename == 'notes.txt'
    assert described[0].size == 11
    assert described[0].content_type == 'application/octet-stream'
    assert upload.file.tell() == 0
