import random

import pytest

from pagestore import errors
from pagestore.common import PAGE_SIZE
from pagestore.disk_manager import DiskManager

MAX_FILES = 4
MAX_PAGES = 8


@pytest.fixture
def dm():
    return DiskManager()


def test_directory_lifecycle(dm, tmp_path):
    path = str(tmp_path / "db")
    assert not dm.is_dir(path)
    dm.create_dir(path)
    assert dm.is_dir(path)
    with pytest.raises(errors.UnixError):
        dm.create_dir(path)
    dm.destroy_dir(path)
    assert not dm.is_dir(path)


def test_file_lifecycle_errors(dm, tmp_path):
    path = str(tmp_path / "0.txt")
    with pytest.raises(errors.FileNotFoundError):
        dm.open_file(path)
    dm.create_file(path)
    assert dm.is_file(path)
    with pytest.raises(errors.FileExistsError):
        dm.create_file(path)
    fd = dm.open_file(path)
    with pytest.raises(errors.FileNotClosedError):
        dm.open_file(path)
    with pytest.raises(errors.FileNotClosedError):
        dm.destroy_file(path)
    dm.close_file(fd)
    dm.destroy_file(path)
    assert not dm.is_file(path)
    with pytest.raises(errors.FileNotFoundError):
        dm.destroy_file(path)


def test_close_unopened_fd(dm):
    with pytest.raises(errors.FileNotOpenError):
        dm.close_file(12345)
    with pytest.raises(errors.FileNotOpenError):
        dm.get_file_name(12345)


def test_allocate_page_sequence(dm, tmp_path):
    path = str(tmp_path / "a")
    dm.create_file(path)
    fd = dm.open_file(path)
    try:
        dm.set_fd2pageno(fd, 0)
        assert [dm.allocate_page(fd) for _ in range(5)] == [0, 1, 2, 3, 4]
        assert dm.get_fd2pageno(fd) == 5
        dm.set_fd2pageno(fd, 10)
        assert dm.allocate_page(fd) == 10
    finally:
        dm.close_file(fd)


def test_allocate_page_rejects_bad_fd(dm):
    with pytest.raises(errors.InternalError):
        dm.allocate_page(-1)
    with pytest.raises(errors.InternalError):
        dm.allocate_page(DiskManager.MAX_FD)


def test_pages_round_trip_across_files_and_reopen(dm, tmp_path):
    rng = random.Random(7)
    mock = {}
    fds = {}
    for i in range(MAX_FILES):
        path = str(tmp_path / f"{i}.txt")
        dm.create_file(path)
        fd = dm.open_file(path)
        fds[path] = fd
        dm.set_fd2pageno(fd, 0)
        for expected_no in range(MAX_PAGES):
            page_no = dm.allocate_page(fd)
            assert page_no == expected_no
            data = rng.randbytes(PAGE_SIZE)
            dm.write_page(fd, page_no, data)
            mock[(path, page_no)] = data

    for (path, page_no), data in mock.items():
        assert dm.read_page(fds[path], page_no, PAGE_SIZE) == data

    for path, fd in list(fds.items()):
        assert dm.get_file_name(fd) == path
        assert dm.get_file_size(path) == PAGE_SIZE * MAX_PAGES
        dm.close_file(fd)
        fds[path] = dm.open_file(path)

    for (path, page_no), data in mock.items():
        assert dm.read_page(fds[path], page_no, PAGE_SIZE) == data

    for path, fd in fds.items():
        dm.close_file(fd)
        dm.destroy_file(path)
        with pytest.raises(errors.FileNotFoundError):
            dm.destroy_file(path)


def test_read_past_end_fails(dm, tmp_path):
    path = str(tmp_path / "short")
    dm.create_file(path)
    fd = dm.open_file(path)
    try:
        dm.write_page(fd, 0, b"x" * 10)
        with pytest.raises(errors.InternalError):
            dm.read_page(fd, 0, PAGE_SIZE)
        assert dm.read_page(fd, 0, 10) == b"x" * 10
    finally:
        dm.close_file(fd)


def test_get_file_fd_opens_once(dm, tmp_path):
    path = str(tmp_path / "f")
    dm.create_file(path)
    fd = dm.get_file_fd(path)
    try:
        assert dm.get_file_fd(path) == fd
        assert dm.get_file_name(fd) == path
    finally:
        dm.close_file(fd)


def test_get_file_size_missing(dm, tmp_path):
    assert dm.get_file_size(str(tmp_path / "missing")) == -1


def test_log_append_and_read(dm, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    dm.create_file("db.log")
    try:
        dm.write_log(b"hello")
        dm.write_log(b"world")
        assert dm.read_log(100, 0) == b"helloworld"
        assert dm.read_log(3, 5) == b"wor"
        assert dm.read_log(10, 10) == b""
        assert dm.read_log(10, 11) is None
    finally:
        dm.close_file(dm.log_fd)
    assert dm.log_fd == -1


def test_log_requires_file(dm, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(errors.FileNotFoundError):
        dm.write_log(b"data")