from .catalog import MISSIONS, PENALTIES, SHOP_ITEMS, Mission, Penalty, Reward, RewardKind, ShopItem, parse_reward
from .errors import PenaltyNotFoundError, RewardBlockedError, TimeArenaError
from .record import Ban, Event, EventKind, ProgressRecord, is_expired, level_for_xp
from .store import JsonFileStore, MemoryStore
from .tracker import BanStatus, ProgressTracker
