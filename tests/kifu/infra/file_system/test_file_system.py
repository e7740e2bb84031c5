from pathlib import Path

from kifu.infra.file_system.file_system import FileSystem


class TestFileSystem:
    def test_write_text_creates_parent(self, tmp_path: Path) -> None:
        path = tmp_path / "records" / "game.csa"
        FileSystem.write_text(path, "V2.2\nPI\n+\n")
        assert path.read_bytes() == b"V2.2\nPI\n+\n"

    def test_write_text_encoding(self, tmp_path: Path) -> None:
        path = tmp_path / "game.csa"
        FileSystem.write_text(path, "N+羽生\n", encoding="shift_jis")
        assert path.read_bytes() == "N+羽生\n".encode("shift_jis")
