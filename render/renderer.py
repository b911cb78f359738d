from pathlib import Path
from typing import Tuple

import cv2
import numpy as np

from remi.config import HIGH_ROUND_SCORE
from remi.engine import has_winner, ranking, totals
from remi.models import Match
from remi.timeline import build_match_timeline

# BGR
BACKGROUND = (32, 32, 32)
WHITE = (255, 255, 255)
GREY = (170, 170, 170)
GREEN = (80, 200, 80)
RED = (70, 70, 230)
LEADER_BG = (60, 90, 60)


class ScoreboardRenderer:
    """
    Draws a scoreboard card for one match:
    header, ranking (leader highlighted), round table, totals.
    """

    width = 640
    header_height = 60
    row_height = 30
    margin = 20

    def __init__(self, match: Match):
        self.match = match
        self.timeline = build_match_timeline(match)

    def image_size(self) -> Tuple[int, int]:
        players = len(self.match.players)
        # header + ranking rows + table header + round rows + totals row
        rows = players + 1 + len(self.timeline) + 1
        height = self.header_height + rows * self.row_height + 2 * self.margin
        return height, self.width

    def render(self) -> np.ndarray:
        height, width = self.image_size()
        frame = np.full((height, width, 3), BACKGROUND, dtype=np.uint8)

        y = self._draw_header(frame)
        y = self._draw_ranking(frame, y)
        self._draw_rounds(frame, y)

        return frame

    def save(self, path: Path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        if not cv2.imwrite(str(path), self.render()):
            raise RuntimeError(f"Cannot write image: {path}")

        return path

    # ----------------------------------------------------
    # DRAWING
    # ----------------------------------------------------

    def _text(self, frame, text: str, x: int, y: int, scale: float = 0.6, color=WHITE, thickness: int = 1):
        cv2.putText(frame, text, (x, y), cv2.FONT_HERSHEY_SIMPLEX, scale, color, thickness, cv2.LINE_AA)

    def _draw_header(self, frame) -> int:
        x = self.margin
        y = self.margin + 25

        self._text(frame, self.match.name, x, y, scale=0.8, thickness=2)

        status = f"Target {self.match.target_score}"
        if self.match.finished:
            status += " - finished"
        elif has_winner(self.match):
            status += " - target reached"
        self._text(frame, status, x, y + 25, scale=0.5, color=GREY)

        return self.margin + self.header_height

    def _draw_ranking(self, frame, y: int) -> int:
        current = totals(self.match)

        for place, idx in enumerate(ranking(self.match)):
            top = y + place * self.row_height
            if place == 0 and self.match.rounds:
                cv2.rectangle(frame, (self.margin, top), (self.width - self.margin, top + self.row_height), LEADER_BG, -1)

            baseline = top + self.row_height - 9
            self._text(frame, f"{place + 1}. {self.match.players[idx]}", self.margin + 10, baseline)
            self._text(frame, f"{current[idx]} pts", self.width - self.margin - 110, baseline)

        return y + len(self.match.players) * self.row_height

    def _column_x(self, idx: int) -> int:
        first = self.margin + 110
        step = (self.width - first - self.margin) // len(self.match.players)
        return first + idx * step

    def _draw_rounds(self, frame, y: int) -> int:
        baseline = y + self.row_height - 9

        for idx, player in enumerate(self.match.players):
            self._text(frame, player[:10], self._column_x(idx), baseline, scale=0.5, color=GREY)

        for snap in self.timeline:
            y += self.row_height
            baseline = y + self.row_height - 9
            self._text(frame, f"Round {snap.round_number}", self.margin, baseline, scale=0.5, color=GREY)

            for idx, score in enumerate(snap.scores):
                color = WHITE
                if score == 0:
                    color = GREEN
                elif score >= HIGH_ROUND_SCORE:
                    color = RED
                self._text(frame, str(score), self._column_x(idx), baseline, scale=0.5, color=color)

        y += self.row_height
        baseline = y + self.row_height - 9
        self._text(frame, "Total", self.margin, baseline, scale=0.5, thickness=2)
        for idx, total in enumerate(totals(self.match)):
            self._text(frame, str(total), self._column_x(idx), baseline, scale=0.5, thickness=2)

        return y + self.row_height
