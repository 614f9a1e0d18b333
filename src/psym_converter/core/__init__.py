"""
Core Layer Package
"""
from .state import ChipState
from .stream import Sample, Stream, replay
from .tracker import DeltaTracker, compute_writes
from .collector import SampleCollector
