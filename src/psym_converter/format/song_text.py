# psym_converter/format/song_text.py
"""
Pythonリテラル形式のテキスト出力。

    SongInfo = {'clock': 2000000, 'rate': 50, 'num': 3646}
    Song = [
        [(0,0),(1,0),(7,255)],[(4,255),(7,251)],
        ...
    ]

改行は可読性のためだけのもので、読み込み側は依存してはいけません。
"""
import ast
from typing import TextIO

from psym_converter.core.stream import Sample, Stream

# 1行に書くレジスタ組数の目安（これを超えたら改行）
WRAP_PAIR_COUNT = 10


class SongTextFormatError(ValueError):
    pass

# @intent:responsibility StreamをSongInfo/Songの2つの代入文として書き出します。
class SongTextWriter:
    def to_text(self, stream: Stream) -> str:
        parts = [
            f"SongInfo = {{'clock': {stream.clock_hz}, 'rate': {stream.sample_rate_hz}, "
            f"'num': {stream.sample_count}}}\n",
            "Song = [\n",
        ]

        reg_count = 0
        for sample in stream.samples:
            if not reg_count:
                parts.append("\t")
            parts.append("[")
            parts.append(",".join(f"({reg},{val})" for reg, val in sample))
            parts.append("],")
            reg_count += len(sample)
            if reg_count > WRAP_PAIR_COUNT:
                reg_count = 0
                parts.append("\n")

        parts.append("]\n")
        return "".join(parts)

    def write(self, stream: Stream, sink: TextIO) -> None:
        sink.write(self.to_text(stream))

    def write_file(self, stream: Stream, path: str) -> None:
        with open(path, 'w', encoding="ascii", newline="\n") as f:
            self.write(stream, f)

# @intent:responsibility テキスト形式を解析してStreamを復元します。
# @intent:rationale 任意のコードを実行しないよう、代入文の右辺はast.literal_evalでのみ評価します。
class SongTextReader:
    def from_text(self, text: str) -> Stream:
        try:
            module = ast.parse(text)
        except SyntaxError as e:
            raise SongTextFormatError(f"Invalid song text: {e}")

        bindings = {}
        for node in module.body:
            if not isinstance(node, ast.Assign) or len(node.targets) != 1 \
                    or not isinstance(node.targets[0], ast.Name):
                raise SongTextFormatError(f"Unexpected statement on line {node.lineno}")
            try:
                bindings[node.targets[0].id] = ast.literal_eval(node.value)
            except ValueError as e:
                raise SongTextFormatError(f"Non-literal value for {node.targets[0].id}: {e}")

        if "SongInfo" not in bindings or "Song" not in bindings:
            raise SongTextFormatError("Song text must define both SongInfo and Song")

        info = bindings["SongInfo"]
        song = bindings["Song"]
        try:
            stream = Stream(clock_hz=int(info["clock"]), sample_rate_hz=int(info["rate"]))
            for entry in song:
                stream.append(Sample.from_pairs(entry))
        except (KeyError, TypeError, ValueError) as e:
            raise SongTextFormatError(f"Invalid song data: {e}")

        if int(info.get("num", -1)) != stream.sample_count:
            raise SongTextFormatError(
                f"SongInfo num {info.get('num')} does not match {stream.sample_count} samples"
            )
        return stream

    def read(self, source: TextIO) -> Stream:
        return self.from_text(source.read())

    def read_file(self, path: str) -> Stream:
        with open(path, 'r', encoding="ascii") as f:
            return self.read(f)
