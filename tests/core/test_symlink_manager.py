"""符号链接管理器测试"""

import os
import shutil
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from symbolic.core.data_structures import LinkOutcome, LinkPair, LinkState
from symbolic.core.exceptions import (
    DirectoryCreateError,
    LinkCreateError,
    LinkException,
    NoParentDirectoryError,
    NotASymlinkError,
    UnlinkError,
)
from symbolic.core.symlink_manager import SymlinkManager


class TestSymlinkManager:
    """SymlinkManager 测试类"""

    @pytest.fixture
    def temp_dir(self):
        """创建临时目录"""
        temp_path = tempfile.mkdtemp()
        yield Path(temp_path)
        shutil.rmtree(temp_path, ignore_errors=True)

    @pytest.fixture
    def symlink_manager(self):
        """创建 SymlinkManager 实例"""
        return SymlinkManager()

    @pytest.fixture
    def source_file(self, temp_dir):
        """创建源文件"""
        file_path = temp_dir / "source.txt"
        file_path.write_text("test content")
        return file_path

    @pytest.fixture
    def source_dir(self, temp_dir):
        """创建源目录"""
        dir_path = temp_dir / "source_dir"
        dir_path.mkdir()
        (dir_path / "file1.txt").write_text("file1")
        (dir_path / "file2.txt").write_text("file2")
        return dir_path

    # 创建符号链接测试

    def test_create_symlink_file(self, symlink_manager, temp_dir, source_file):
        """测试创建文件符号链接"""
        target_link = temp_dir / "link.txt"

        result = symlink_manager.create_symlink(source_file, target_link)

        assert result == LinkOutcome.CREATED
        assert target_link.is_symlink()
        assert os.readlink(target_link) == str(source_file)
        assert target_link.read_text() == "test content"

    def test_create_symlink_directory(self, symlink_manager, temp_dir, source_dir):
        """测试创建目录符号链接"""
        target_link = temp_dir / "link_dir"

        result = symlink_manager.create_symlink(str(source_dir), str(target_link))

        assert result == LinkOutcome.CREATED
        assert (target_link / "file1.txt").read_text() == "file1"

    def test_create_symlink_dangling_source(self, symlink_manager, temp_dir):
        """测试源不存在时仍创建悬空链接"""
        target_link = temp_dir / "dangling"

        result = symlink_manager.create_symlink(temp_dir / "missing", target_link)

        assert result == LinkOutcome.CREATED
        assert target_link.is_symlink()
        assert not target_link.exists()

    def test_create_symlink_twice_is_skipped(self, symlink_manager, temp_dir, source_file):
        """测试重复创建时跳过且不改动文件系统"""
        target_link = temp_dir / "link.txt"
        symlink_manager.create_symlink(source_file, target_link)
        before = os.lstat(target_link)

        result = symlink_manager.create_symlink(source_file, target_link)

        assert result == LinkOutcome.SKIPPED
        after = os.lstat(target_link)
        assert (before.st_ino, before.st_mtime_ns) == (after.st_ino, after.st_mtime_ns)
        assert os.readlink(target_link) == str(source_file)

    def test_existing_symlink_elsewhere_is_skipped(self, symlink_manager, temp_dir, source_file):
        """测试目标已是指向别处的链接时也跳过"""
        target_link = temp_dir / "link.txt"
        os.symlink(temp_dir / "other", target_link)

        result = symlink_manager.create_symlink(source_file, target_link)

        assert result == LinkOutcome.SKIPPED
        assert os.readlink(target_link) == str(temp_dir / "other")

    def test_create_symlink_creates_parent_chain(self, symlink_manager, temp_dir, source_file):
        """测试父目录不存在时逐级创建"""
        target_link = temp_dir / "a" / "b" / "c" / "link.txt"

        result = symlink_manager.create_symlink(source_file, target_link)

        assert result == LinkOutcome.CREATED
        assert (temp_dir / "a" / "b" / "c").is_dir()
        assert target_link.is_symlink()

    def test_create_symlink_target_is_regular_file(self, symlink_manager, temp_dir, source_file):
        """测试目标被普通文件占用"""
        target_link = temp_dir / "occupied.txt"
        target_link.write_text("existing")

        with pytest.raises(LinkCreateError) as exc_info:
            symlink_manager.create_symlink(source_file, target_link)

        error = exc_info.value
        assert error.source == str(source_file)
        assert error.target == str(target_link)
        assert isinstance(error.error, FileExistsError)
        assert "Failed to form the following link" in error.message
        assert target_link.read_text() == "existing"

    def test_create_symlink_root_target(self, symlink_manager, source_file):
        """测试目标为根路径"""
        with pytest.raises(NoParentDirectoryError):
            symlink_manager.create_symlink(source_file, "/")

    def test_create_symlink_parent_creation_fails(self, symlink_manager, temp_dir, source_file):
        """测试父目录创建失败时不创建链接"""
        target_link = temp_dir / "deny" / "link.txt"

        with patch.object(Path, "mkdir", side_effect=PermissionError(13, "Permission denied")):
            with pytest.raises(DirectoryCreateError) as exc_info:
                symlink_manager.create_symlink(source_file, target_link)

        assert exc_info.value.directory == str(temp_dir / "deny")
        assert "Permission denied" in exc_info.value.message
        assert not target_link.is_symlink()

    def test_create_symlink_os_error_wrapped(self, symlink_manager, temp_dir, source_file):
        """测试底层错误被包装"""
        target_link = temp_dir / "link.txt"

        with patch("symbolic.core.symlink_manager.os.symlink", side_effect=OSError(28, "No space left on device")):
            with pytest.raises(LinkCreateError) as exc_info:
                symlink_manager.create_symlink(source_file, target_link)

        assert "No space left on device" in exc_info.value.message

    def test_create_symlink_nul_in_target(self, symlink_manager, temp_dir, source_file):
        """测试目标路径含 NUL 字符"""
        with pytest.raises(LinkCreateError) as exc_info:
            symlink_manager.create_symlink(source_file, temp_dir / "bad\x00name")

        assert isinstance(exc_info.value.error, ValueError)

    def test_create_symlink_nul_in_parent(self, symlink_manager, temp_dir, source_file):
        """测试父目录路径含 NUL 字符"""
        with pytest.raises(DirectoryCreateError) as exc_info:
            symlink_manager.create_symlink(source_file, temp_dir / "bad\x00dir" / "link")

        assert isinstance(exc_info.value.error, ValueError)

    # 删除符号链接测试

    def test_remove_symlink_file(self, symlink_manager, temp_dir, source_file):
        """测试删除文件符号链接"""
        target_link = temp_dir / "link.txt"
        symlink_manager.create_symlink(source_file, target_link)

        symlink_manager.remove_symlink(target_link)

        assert not target_link.is_symlink()
        assert not target_link.exists()
        assert source_file.read_text() == "test content"

    def test_remove_symlink_directory_keeps_source(self, symlink_manager, temp_dir, source_dir):
        """测试删除目录链接不影响源目录内容"""
        target_link = temp_dir / "nested" / "link_dir"
        symlink_manager.create_symlink(source_dir, target_link)

        symlink_manager.remove_symlink(str(target_link))

        assert not target_link.is_symlink()
        assert not target_link.exists()
        assert sorted(p.name for p in source_dir.iterdir()) == ["file1.txt", "file2.txt"]

    def test_remove_dangling_symlink(self, symlink_manager, temp_dir):
        """测试删除悬空链接"""
        target_link = temp_dir / "dangling"
        os.symlink(temp_dir / "missing", target_link)

        symlink_manager.remove_symlink(target_link)

        assert not target_link.is_symlink()

    def test_remove_regular_file_refused(self, symlink_manager, source_file):
        """测试拒绝删除普通文件"""
        with pytest.raises(NotASymlinkError) as exc_info:
            symlink_manager.remove_symlink(source_file)

        assert exc_info.value.target == str(source_file)
        assert source_file.read_text() == "test content"

    def test_remove_directory_refused(self, symlink_manager, source_dir):
        """测试拒绝删除真实目录"""
        with pytest.raises(NotASymlinkError):
            symlink_manager.remove_symlink(source_dir)

        assert (source_dir / "file1.txt").exists()

    def test_remove_missing_path(self, symlink_manager, temp_dir):
        """测试删除不存在的路径"""
        with pytest.raises(NotASymlinkError):
            symlink_manager.remove_symlink(temp_dir / "nothing")

    def test_remove_symlink_os_error_wrapped(self, symlink_manager, temp_dir, source_file):
        """测试删除失败被包装"""
        target_link = temp_dir / "link.txt"
        symlink_manager.create_symlink(source_file, target_link)

        with patch.object(Path, "unlink", side_effect=PermissionError(13, "Permission denied")):
            with pytest.raises(UnlinkError) as exc_info:
                symlink_manager.remove_symlink(target_link)

        assert isinstance(exc_info.value, LinkException)
        assert exc_info.value.target == str(target_link)
        assert target_link.is_symlink()

    # 状态检查测试

    def test_status_linked(self, symlink_manager, temp_dir, source_file):
        """测试已正确链接"""
        target_link = temp_dir / "link.txt"
        symlink_manager.create_symlink(source_file, target_link)

        status = symlink_manager.get_link_status(LinkPair(str(source_file), str(target_link)))

        assert status.state == LinkState.LINKED
        assert status.is_healthy
        assert status.actual_source == str(source_file)

    def test_status_missing(self, symlink_manager, temp_dir, source_file):
        """测试目标不存在"""
        status = symlink_manager.get_link_status(LinkPair(str(source_file), str(temp_dir / "x")))

        assert status.state == LinkState.MISSING
        assert not status.is_healthy

    def test_status_mislinked(self, symlink_manager, temp_dir, source_file):
        """测试链接指向别处"""
        target_link = temp_dir / "link.txt"
        os.symlink(temp_dir / "other", target_link)

        status = symlink_manager.get_link_status(LinkPair(str(source_file), str(target_link)))

        assert status.state == LinkState.MISLINKED
        assert status.actual_source == str(temp_dir / "other")

    def test_status_broken(self, symlink_manager, temp_dir):
        """测试链接正确但源不存在"""
        source = str(temp_dir / "gone")
        target_link = temp_dir / "link"
        os.symlink(source, target_link)

        status = symlink_manager.get_link_status(LinkPair(source, str(target_link)))

        assert status.state == LinkState.BROKEN

    def test_status_conflict(self, symlink_manager, temp_dir, source_file):
        """测试目标被普通文件占用"""
        occupied = temp_dir / "occupied"
        occupied.write_text("x")

        status = symlink_manager.get_link_status(LinkPair(str(source_file), str(occupied)))

        assert status.state == LinkState.CONFLICT
