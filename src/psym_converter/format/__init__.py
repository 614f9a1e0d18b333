"""
Output Format Package
"""
from .psym import PsymReader, PsymWriter, PsymFormatError
from .song_text import SongTextReader, SongTextWriter, SongTextFormatError
