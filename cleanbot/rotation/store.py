"""
Rotation state persistence
Stores the roster and current selection as a single JSON document
"""

import json
import random
from pathlib import Path
from typing import Optional

from .errors import PersistenceError
from .models import RotationState
from .selector import select_next
from ..utils.logging import get_logger

logger = get_logger(__name__)


class StateStore:
    """Reads and writes the whole rotation state, never partially"""
    
    def __init__(self, data_file: str = "data/users.json", rng: Optional[random.Random] = None):
        self.data_file = Path(data_file)
        self.rng = rng
    
    def save(self, state: RotationState):
        """Overwrite the stored record with the given state"""
        temp_file = self.data_file.with_suffix('.tmp')
        try:
            self.data_file.parent.mkdir(parents=True, exist_ok=True)
            
            # Write to temporary file first to avoid corruption
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(state.to_dict(), f, indent=2, ensure_ascii=False)
            
            # Atomic move to final location
            temp_file.replace(self.data_file)
            logger.debug(f"Rotation state saved to {self.data_file}")
            
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to save rotation state to {self.data_file}: {e}")
            try:
                if temp_file.exists():
                    temp_file.unlink()
            except OSError:
                pass
            raise PersistenceError(f"Could not save state! error : {e}") from e
    
    def _read_raw(self) -> str:
        try:
            return self.data_file.read_text(encoding='utf-8')
        except FileNotFoundError:
            return ''
        except OSError as e:
            raise PersistenceError(f"Could not read state from {self.data_file}: {e}") from e
    
    def load(self) -> RotationState:
        """
        Read the stored state.
        
        A missing or empty record bootstraps an empty roster. A roster without a
        valid current selection is healed by picking someone. Either case is
        written back before returning so the file is consistent after startup.
        """
        raw = self._read_raw()
        save_owed = not raw.strip()
        
        if save_owed:
            logger.info(f"No rotation state in {self.data_file}, starting fresh")
            state = RotationState()
        else:
            try:
                parsed = json.loads(raw)
                if not isinstance(parsed, dict):
                    raise ValueError("expected a JSON object")
                state = RotationState.from_dict(parsed)
            except (ValueError, KeyError, TypeError, AttributeError) as e:
                raise PersistenceError(f"Invalid rotation state in {self.data_file}: {e}") from e
        
        if state.current is None and state.users:
            logger.info("No current selection recorded, selecting one")
            if select_next(state, rng=self.rng):
                save_owed = True
        
        if save_owed:
            self.save(state)
        return state
