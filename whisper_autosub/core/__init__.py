"""Pure caption-track modules.

WHY: The core package holds everything that turns text into timed
captions and back, with no host timeline, no subprocesses. These modules
are deterministic and side-effect free apart from file helpers in srt.py.

HOW: ir.py defines the Caption dataclass, timecode.py converts between
seconds and SRT timestamps/frames, segmenter.py splits raw transcripts
into caption lines, autotimer.py spreads lines across a duration, and
srt.py reads and writes the exchange format.

RULES:
- The Caption dataclass is the contract between all stages
- Nothing in core touches the host timeline
"""
