# psym_converter/format/psym.py
"""
PSYM1 バイナリ形式

ヘッダ（全てリトルエンディアン、パディングなし）:
    PSYM1       (5 bytes)
    CLOCKFREQ   (4 bytes)
    SAMPLERATE  (1 byte)
    NUMSAMPS    (8 bytes)
続いてNUMSAMPS個のサンプル:
    NUMREGSETTINGS (1 byte)
    REGISTER, VALUE (1 byte each) x NUMREGSETTINGS
"""
import struct
from typing import BinaryIO, Union

from psym_converter.common.types import AY_NUM_REGISTERS
from psym_converter.core.stream import Sample, Stream

PSYM_MAGIC = b"PSYM1"
PSYM_HEADER = struct.Struct("<5sIBQ")
PSYM_HEADER_SIZE = PSYM_HEADER.size  # 18


class PsymFormatError(ValueError):
    pass

# @intent:responsibility StreamをPSYM1形式のバイト列に変換して書き込みます。
class PsymWriter:
    """
    PSYM1形式のシリアライザ。同じStreamからは常に同じバイト列を生成します。
    シンクへの書き込みエラー（OSError）はそのまま呼び出し元へ伝播します。
    """
    def to_bytes(self, stream: Stream) -> bytes:
        data = bytearray(PSYM_HEADER.pack(PSYM_MAGIC, stream.clock_hz,
                                          stream.sample_rate_hz, stream.sample_count))
        for sample in stream.samples:
            data.append(len(sample))
            for reg, val in sample:
                data.append(reg)
                data.append(val)
        return bytes(data)

    def write(self, stream: Stream, sink: BinaryIO) -> None:
        sink.write(self.to_bytes(stream))

    def write_file(self, stream: Stream, path: str) -> None:
        with open(path, 'wb') as f:
            self.write(stream, f)

# @intent:responsibility PSYM1形式のバイト列を解析してStreamを復元します。
class PsymReader:
    """
    PSYM1形式のデシリアライザ。読み込んだStreamを再シリアライズすると同一のバイト列になります。
    """
    def from_bytes(self, data: bytes) -> Stream:
        if len(data) < PSYM_HEADER_SIZE:
            raise PsymFormatError(f"PSYM data too short for header: {len(data)} bytes")

        magic, clock_hz, sample_rate_hz, num_samples = PSYM_HEADER.unpack_from(data, 0)
        if magic != PSYM_MAGIC:
            raise PsymFormatError(f"Invalid PSYM magic: {magic!r}")

        stream = Stream(clock_hz=clock_hz, sample_rate_hz=sample_rate_hz)
        offset = PSYM_HEADER_SIZE
        for index in range(num_samples):
            if offset >= len(data):
                raise PsymFormatError(f"Truncated PSYM data: sample {index} of {num_samples} missing")
            count = data[offset]
            offset += 1
            if not 0 < count <= AY_NUM_REGISTERS:
                raise PsymFormatError(f"Invalid register count {count} in sample {index}")
            end = offset + count * 2
            if end > len(data):
                raise PsymFormatError(f"Truncated PSYM data in sample {index}")
            pairs = [(data[i], data[i + 1]) for i in range(offset, end, 2)]
            try:
                stream.append(Sample.from_pairs(pairs))
            except ValueError as e:
                raise PsymFormatError(f"Invalid sample {index}: {e}")
            offset = end

        if offset != len(data):
            raise PsymFormatError(f"{len(data) - offset} trailing bytes after {num_samples} samples")
        return stream

    def read(self, source: Union[BinaryIO, bytes]) -> Stream:
        if isinstance(source, (bytes, bytearray)):
            return self.from_bytes(bytes(source))
        return self.from_bytes(source.read())

    def read_file(self, path: str) -> Stream:
        with open(path, 'rb') as f:
            return self.read(f)
