import glob
import logging
import os
import random
from typing import Any, Dict, List, Optional

import pandas as pd

logger = logging.getLogger(__name__)

DEFAULT_SCENES = [
    "A clear, well-lit photograph of a kitchen table set for breakfast for two. "
    "The scene should only contain objects and food items that are common A2-level "
    "English vocabulary (e.g., table, chair, plate, cup, apple, banana, bread, milk). "
    "The style should be realistic and easy for an English learner to understand. "
    "No people.",
]


# --- Service Layer: Scene Pool Management ---
class SceneLibrary:
    """Loads the scene descriptions images are generated from."""

    def __init__(self, directory: str, rng: Optional[random.Random] = None):
        self.directory = directory
        self.rng = rng or random.Random()
        self.scene_sets: Dict[str, List[str]] = {}
        self.load_all()

    def load_all(self):
        self.scene_sets = {}
        csv_files = sorted(glob.glob(os.path.join(self.directory, "*.csv")))
        for file_path in csv_files:
            name = os.path.splitext(os.path.basename(file_path))[0]
            try:
                df = pd.read_csv(file_path, encoding="utf-8")
            except Exception as e:
                logger.error(f"Failed to load {file_path}: {e}")
                continue
            if "description" not in df.columns:
                logger.error(f"Skipping {name}: Missing 'description' column.")
                continue
            descriptions = [
                str(d).strip() for d in df["description"].dropna() if str(d).strip()
            ]
            if descriptions:
                self.scene_sets[name] = descriptions
                logger.info(f"Loaded {len(descriptions)} scenes from {name}")

        if not self.scene_sets:
            logger.warning(
                f"No scene CSV files found in {self.directory}. Using built-in scenes."
            )
            self.scene_sets["default"] = list(DEFAULT_SCENES)

    @property
    def descriptions(self) -> List[str]:
        return [d for scenes in self.scene_sets.values() for d in scenes]

    def choose(self) -> str:
        """Draws one description uniformly from every loaded set."""
        return self.rng.choice(self.descriptions)

    def summary(self) -> List[Dict[str, Any]]:
        sets = [
            {"id": key, "name": key.replace("_", " ").title(), "count": len(scenes)}
            for key, scenes in self.scene_sets.items()
        ]
        sets.sort(key=lambda x: x["name"])
        return sets
