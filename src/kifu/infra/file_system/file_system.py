from pathlib import Path

from kifu.interface import exporter


class FileSystem(exporter.FileSystem):
    @staticmethod
    def write_text(
        path: Path, content: str, encoding: str = "utf-8"
    ) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        # 改行コードはCSAの出力どおり"\n"のまま書く
        with open(path, "w", encoding=encoding, newline="\n") as f:
            f.write(content)
