# src/psym_converter/cli/app.py
"""
コマンドラインのエントリポイント。

    psym-convert [-p] infile.ym outfile.psym

YMファイルを読み込み、変化したレジスタだけを記録したPSYM1形式
（-p指定時はPythonリテラル形式）で書き出します。
"""
import argparse
import os
import sys
from typing import List, Optional

from psym_converter.config.loader import ConfigLoader
from psym_converter.config.models import ConversionConfig
from psym_converter.core.collector import SampleCollector
from psym_converter.core.stream import Stream
from psym_converter.core.tracker import DeltaTracker
from psym_converter.format.psym import PsymWriter
from psym_converter.format.song_text import SongTextWriter
from psym_converter.source.source import SnapshotSource
from psym_converter.source.ym import YmFileSource

# @intent:responsibility ソースからStreamを収集し、設定された形式で出力ファイルに書き込みます。
# @intent:post-condition openに失敗した場合は何も削除せずOSErrorを伝播します。
#                        open後の書き込みに失敗した場合は、部分出力を削除してからOSErrorを再送出します。
def convert(source: SnapshotSource, output_path: str, config: ConversionConfig) -> Stream:
    config.validate()
    collector = SampleCollector(DeltaTracker(config.skip_duplicates), verbose=config.verbose)
    stream = collector.collect(source, config.clock_hz, config.sample_rate_hz)

    print(f"collected {stream.sample_count} samples, writing to {output_path}")
    if config.output_format == "python":
        writer = SongTextWriter()
        f = open(output_path, 'w', encoding="ascii", newline="\n")
    else:
        writer = PsymWriter()
        f = open(output_path, 'wb')

    try:
        with f:
            writer.write(stream, f)
    except OSError:
        remove_partial_output(output_path)
        raise
    return stream


def remove_partial_output(path: str) -> None:
    try:
        os.remove(path)
    except OSError as e:
        print(f"Warning: could not remove partial output '{path}': {e}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="psym-convert",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="Convert a YM register dump into a PSYM1 (or Python) register-change stream.",
        epilog="Notes:\n LHA compressed YM files must be extracted first.\n")
    parser.add_argument("input", help="YM source file (uncompressed)")
    parser.add_argument("output", help="output file")
    parser.add_argument("-p", "--python", help="Write a Python literal list instead of PSYM1", action="store_true")
    parser.add_argument("-c", "--config", metavar="<file>", help="YAML conversion config")
    parser.add_argument("--clock", type=int, metavar="<hz>", help="Chip clock frequency stored in the header (default: 2000000)")
    parser.add_argument("--rate", type=int, metavar="<hz>", help="Playback sample rate stored in the header, 0-255 (default: 50)")
    parser.add_argument("-k", "--keep-duplicates", help="Write every set register on every tick", action="store_true")
    parser.add_argument("-v", "--verbose", help="Print every sample's register writes", action="store_true")
    return parser

# @intent:responsibility 設定ファイルとコマンドライン引数から変換設定を組み立てます。
# @intent:rationale コマンドライン引数は設定ファイルの値を上書きします。
def build_config(args: argparse.Namespace) -> ConversionConfig:
    config = ConfigLoader().load_from_file(args.config) if args.config else ConversionConfig()
    if args.clock is not None:
        config.clock_hz = args.clock
    if args.rate is not None:
        config.sample_rate_hz = args.rate
    if args.python:
        config.output_format = "python"
    if args.keep_duplicates:
        config.skip_duplicates = False
    if args.verbose:
        config.verbose = True
    config.validate()
    return config


def print_song_info(source: YmFileSource) -> None:
    info = source.info
    print(f"Name: {info.song_name}")
    print(f"Author: {info.author_name}")
    print(f"Comment: {info.song_comment}")
    print(f"Duration: {info.duration_seconds // 60}:{info.duration_seconds % 60:02d}")
    print(f"Format: {info.format_id} ({info.nb_frames} frames at {info.frames_rate} Hz, clock {info.chip_clock} Hz)")

# @intent:responsibility コマンドラインから変換を実行し、終了コードを返します。
def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if not os.path.isfile(args.input):
        print(f"Error: File '{args.input}' not found")
        return 2

    try:
        config = build_config(args)
        source = YmFileSource(args.input)
    except (OSError, ValueError) as e:
        print(f"Error: {e}")
        return 2

    print_song_info(source)
    if config.output_format == "python":
        print("Pure python")

    try:
        convert(source, args.output, config)
    except OSError as e:
        print(f"Error: could not write '{args.output}': {e}")
        return 1
    return 0

if __name__ == '__main__':
    sys.exit(main())
