"""
Asciinema (asciicast v2) recording of rendered frames.

The file starts with a JSON header line followed by one output event per
frame: [seconds_since_start, "o", data].
"""

import json
import logging
import time

log = logging.getLogger("mhn_globe.recorder")

CLEAR_SCREEN = "\x1b[H\x1b[2J"


class AsciinemaRecorder:

    def __init__(self, path, width, height, clock=time.monotonic):
        self.path = path
        self.width = width
        self.height = height
        self._clock = clock
        self._file = open(path, "w", encoding="utf-8")
        self._start = clock()
        self.frames = 0

        header = {
            "version": 2,
            "width": width,
            "height": height,
            "timestamp": int(time.time()),
            "env": {"SHELL": "/bin/sh", "TERM": "xterm-256color"},
        }
        self._file.write(json.dumps(header) + "\n")
        log.info("Recording to %s (%dx%d)", path, width, height)

    def record_frame(self, frame, now=None):
        if self._file is None:
            return
        if now is None:
            now = self._clock()
        data = CLEAR_SCREEN + "\r\n".join(frame.rows())
        event = [round(now - self._start, 6), "o", data]
        self._file.write(json.dumps(event, ensure_ascii=False) + "\n")
        self.frames += 1

    def close(self):
        if self._file is not None:
            self._file.close()
            self._file = None
            log.info("Recorded %d frames to %s", self.frames, self.path)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
