import json
from pathlib import Path
from typing import Optional
from urllib.parse import quote
import logging

from .models import Calibration


class CalibrationStore:
    """One JSON calibration record per video, keyed by video id"""

    def __init__(self, root_dir: Path):
        self.root_dir = Path(root_dir)
        self.logger = logging.getLogger(__name__)

    def path_for(self, video_id: str) -> Path:
        # Percent-encoding keeps distinct ids on distinct files
        safe_id = quote(video_id, safe='')
        return self.root_dir / f"calibration_{safe_id}.json"

    def save(self, calibration: Calibration) -> Path:
        """Write (or fully replace) the record for calibration.video_id"""
        output_path = self.path_for(calibration.video_id)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w') as f:
            json.dump(calibration.to_dict(), f, indent=2)

        self.logger.info(f"Calibration for video '{calibration.video_id}' saved to: {output_path}")
        return output_path

    def load(self, video_id: str) -> Optional[Calibration]:
        input_path = self.path_for(video_id)
        if not input_path.exists():
            self.logger.debug(f"No saved calibration for video '{video_id}'")
            return None

        try:
            with open(input_path, 'r') as f:
                data = json.load(f)
            calibration = Calibration.from_dict(data)
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            self.logger.error(f"Failed to load calibration from {input_path}: {e}")
            return None

        if calibration.video_id != video_id:
            self.logger.error(f"Calibration in {input_path} belongs to video "
                              f"'{calibration.video_id}', not '{video_id}'")
            return None
        return calibration

    def delete(self, video_id: str) -> bool:
        input_path = self.path_for(video_id)
        if not input_path.exists():
            return False
        input_path.unlink()
        self.logger.info(f"Calibration for video '{video_id}' deleted")
        return True

    def exists(self, video_id: str) -> bool:
        return self.path_for(video_id).exists()
