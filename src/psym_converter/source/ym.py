# psym_converter/source/ym.py
"""
YMファイルのレジスタダンプを読み出すスナップショットソース。

対応形式: YM2!, YM3!, YM3b, YM5!, YM6!（非圧縮のもの）。
LHA圧縮されたYMファイルは事前に展開する必要があります。
音声合成やエンベロープのエミュレーションは行わず、フレームごとの
レジスタ値をそのままスナップショットとして供給します。

See:
    http://leonard.oxg.free.fr/ymformat.html
"""
import os
import struct
from dataclasses import dataclass
from typing import BinaryIO, List, Optional

from psym_converter.common.types import AY_NUM_REGISTERS, RegisterSnapshot
from psym_converter.source.source import SnapshotSource

YM_OLD_FORMATS = ("YM2!", "YM3!", "YM3b")
YM_NEW_FORMATS = ("YM5!", "YM6!")

# check string, nb_frames, attributes, nb_digidrums, clock, rate, loop_frame, extra_data
YM_HEADER = struct.Struct(">8sIIHIHIH")

# フレームデータとして記録されているAYレジスタの数（R0-R13）
YM_CHIP_REGISTERS = 14
# R13にこの値が記録されている場合、そのフレームではR13を書き込まない
YM_ENVELOPE_NO_WRITE = 0xFF


class YmFormatError(ValueError):
    pass

# @intent:responsibility YMファイルのヘッダ情報を保持します。
@dataclass(frozen=True)
class YmSongInfo:
    format_id: str
    nb_frames: int
    nb_registers: int
    chip_clock: int
    frames_rate: int
    loop_frame: int = 0
    interleaved: bool = True
    song_name: str = ""
    author_name: str = ""
    song_comment: str = ""

    @property
    def duration_seconds(self) -> int:
        if not self.frames_rate:
            return 0
        return self.nb_frames // self.frames_rate

# @intent:responsibility YMファイルからフレーム単位でスナップショットを供給します。
class YmFileSource(SnapshotSource):
    """
    非圧縮YMファイルを解析し、フレームごとにレジスタスナップショットを返すソース。
    """
    def __init__(self, path: str):
        self._path = path
        with open(path, 'rb') as f:
            self.info, self._frames = self._parse(f, os.path.getsize(path))
        self._position = 0

    # @intent:responsibility ヘッダとフレームデータを解析します。
    def _parse(self, f: BinaryIO, file_size: int):
        head = f.read(7)
        if len(head) >= 7 and head[2:7] == b"-lh5-":
            raise YmFormatError(
                f"'{self._path}' is an LHA compressed YM file. Extract the inner YM file first."
            )
        f.seek(0)
        format_id = f.read(4).decode("latin-1")

        if format_id in YM_OLD_FORMATS:
            data_size = file_size - 4
            if format_id == "YM3b":
                # 末尾4バイトのループ情報はフレームに含めない
                data_size -= 4
            nb_registers = YM_CHIP_REGISTERS
            info = YmSongInfo(
                format_id=format_id,
                nb_frames=data_size // nb_registers,
                nb_registers=nb_registers,
                chip_clock=2000000,
                frames_rate=50,
                interleaved=True,
                song_name=os.path.basename(self._path),
            )
        elif format_id in YM_NEW_FORMATS:
            info = self._parse_new_header(f, format_id)
        else:
            raise YmFormatError(f"Unknown or unsupported YM format: {format_id!r}")

        frames = self._read_frames(f, info)
        if info.format_id in YM_NEW_FORMATS and f.read(4) != b"End!":
            print("Warning: End! marker not found after frames")
        return info, frames

    def _parse_new_header(self, f: BinaryIO, format_id: str) -> YmSongInfo:
        raw = f.read(YM_HEADER.size)
        if len(raw) != YM_HEADER.size:
            raise YmFormatError("Truncated YM header")
        (check_string, nb_frames, attributes, nb_digidrums,
         chip_clock, frames_rate, loop_frame, extra_data) = YM_HEADER.unpack(raw)
        if check_string != b"LeOnArD!":
            raise YmFormatError(f"Invalid YM check string: {check_string!r}")

        # digidrumサンプルは使用しないので読み飛ばす
        for _ in range(nb_digidrums):
            size = struct.unpack(">I", self._read_exact(f, 4))[0]
            f.seek(size, os.SEEK_CUR)
        f.seek(extra_data, os.SEEK_CUR)

        return YmSongInfo(
            format_id=format_id,
            nb_frames=nb_frames,
            nb_registers=16,
            chip_clock=chip_clock,
            frames_rate=frames_rate,
            loop_frame=loop_frame,
            interleaved=bool(attributes & 0x01),
            song_name=self._read_cstr(f),
            author_name=self._read_cstr(f),
            song_comment=self._read_cstr(f),
        )

    def _read_exact(self, f: BinaryIO, size: int) -> bytes:
        data = f.read(size)
        if len(data) != size:
            raise YmFormatError(f"Truncated YM file: expected {size} bytes, got {len(data)}")
        return data

    def _read_cstr(self, f: BinaryIO) -> str:
        chars = bytearray()
        while True:
            c = f.read(1)
            if not c:
                raise YmFormatError("Unterminated string in YM header")
            if c == b"\x00":
                return chars.decode("latin-1")
            chars += c

    # @intent:responsibility フレームデータを読み出し、フレームごとのレジスタ値列に並べ替えます。
    def _read_frames(self, f: BinaryIO, info: YmSongInfo) -> List[bytes]:
        nb_frames = info.nb_frames
        nb_registers = info.nb_registers
        raw = self._read_exact(f, nb_frames * nb_registers)
        if info.interleaved:
            # レジスタごとに全フレーム分が連続している
            return [bytes(raw[r * nb_frames + i] for r in range(nb_registers))
                    for i in range(nb_frames)]
        return [raw[i * nb_registers:(i + 1) * nb_registers] for i in range(nb_frames)]

    # @intent:responsibility 1フレーム分のレジスタ値をスナップショットに変換します。
    # @intent:rationale R14/R15はAYのI/Oポート（YM5/6ではエフェクト情報）なのでチップへは書き込みません。
    #                  StSoundベースの旧変換ツールは(14,0),(15,0)を出力していましたが、ここでは常に未設定です。
    def _frame_to_snapshot(self, frame: bytes) -> RegisterSnapshot:
        snapshot: List[Optional[int]] = [None] * AY_NUM_REGISTERS
        for reg in range(YM_CHIP_REGISTERS):
            snapshot[reg] = frame[reg]
        if snapshot[13] == YM_ENVELOPE_NO_WRITE:
            snapshot[13] = None
        return snapshot

    def has_next(self) -> bool:
        return self._position < len(self._frames)

    def next(self) -> RegisterSnapshot:
        if not self.has_next():
            raise IndexError("YM source is exhausted.")
        frame = self._frames[self._position]
        self._position += 1
        return self._frame_to_snapshot(frame)
