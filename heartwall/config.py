"""Tunable knobs for the heart wall.

Defaults live here as plain values; `load_config()` lets a `.env` file or the
environment override the handful that are worth flipping from the shell:

    HEARTWALL_DEBUG=1          chatty [scheduler]/[halo] traces
    HEARTWALL_POINTS=185       heart points (slot count)
    HEARTWALL_MAX_CARDS=185    cards before the halo
    HEARTWALL_ADAPTIVE=false   fps-driven spawn pacing
    HEARTWALL_IDLE_SPAWN=false spawn on idle time instead of a plain timer
    HEARTWALL_THEME=dark       dark | light
"""

import os
from dataclasses import dataclass, field, replace
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).parent.parent / ".env")

MOBILE_BREAKPOINT = 768

MESSAGES = [
    "STAY HAPPY",
    "DRINK SOME WATER",
    "LONG DAY, WELL DONE",
    "GET SOME REST",
    "EAT SOME FRUIT",
    "YOU CAN DO IT",
    "GOOD LUCK TODAY",
    "KEEP SMILING",
    "LET WORRIES GO",
    "SEE YOU SOON",
    "DREAMS COME TRUE",
    "WEAR A WARM COAT",
    "TAKE IT EASY",
    "FULL OF ENERGY",
    "BE KIND TO YOU",
    "TAKE A BREAK",
    "YOU ARE GREAT",
    "BELIEVE IN YOURSELF",
    "IT WILL BE OK",
    "A SPECIAL DAY",
    "NO NEED TO RUSH",
    "YOU DESERVE MORE",
    "STAY CURIOUS",
    "JUST BE YOU",
    "ENJOY THE MOMENT",
    "BE GENTLE",
    "EAT BREAKFAST",
    "STAY SAFE",
    "BE HAPPY",
    "SLEEP WELL",
    "DO NOT OVERWORK",
    "HUG YOURSELF",
    "TODAY IS LOVELY",
    "LITTLE RITUALS",
    "GETTING BETTER",
    "BLOOM LIKE A FLOWER",
    "STAY KIND",
    "GET SOME SUN",
    "PLAY YOUR SONG",
    "GO FOR A WALK",
    "TREAT YOURSELF",
    "DO WHAT YOU LOVE",
    "DO NOT OVERTHINK",
    "YOU TRIED HARD",
    "GIVE IT TIME",
    "NOBODY IS PERFECT",
    "AT YOUR OWN PACE",
    "LUCK IS COMING",
    "THE FUTURE IS BRIGHT",
    "STAY WARM",
    "PEACE AND JOY",
    "ALL IS WELL",
    "WISHES COME TRUE",
    "KEEP LAUGHING",
    "HEALTH AND JOY",
    "RELAX A LITTLE",
    "SWEET DREAMS",
]

# Second-to-last and last card of a session
FINALE_MESSAGES = ("PAINT YOUR LIFE", "COLOR IT WITH LOVE")

CARD_COLORS_DARK = [
    0x4A3942,  # dusky rose
    0x2F4858,  # deep teal
    0x5A4A3A,  # umber
    0x3A4A3A,  # pine
    0x473A5A,  # violet
    0x4A4A38,  # olive
    0x364852,  # slate
    0x52385A,  # plum
]

CARD_COLORS_LIGHT = [
    0xFFE0E3,  # pink
    0xC7F0FF,  # sky
    0xFFD8A8,  # apricot
    0xD9F2D9,  # mint
    0xE5D7FF,  # lavender
    0xF9F7D9,  # lemon
    0xD2F0F8,  # cyan
    0xFFD4F5,  # orchid
]

# Halo colours as (r, g, b, base_alpha); alpha is replaced by live opacity
HALO_COLORS_DARK = [
    (255, 182, 193, 0.9),  # light pink
    (255, 218, 185, 0.9),  # peach
    (221, 160, 221, 0.9),  # plum
    (173, 216, 230, 0.9),  # light blue
    (255, 239, 213, 0.9),  # papaya
]

HALO_COLORS_LIGHT = [
    (255, 105, 180, 0.9),  # hot pink
    (255, 140, 105, 0.9),  # coral
    (186, 85, 211, 0.9),   # orchid
    (100, 149, 237, 0.9),  # cornflower
    (255, 165, 0, 0.9),    # orange
]


@dataclass(frozen=True)
class DeviceProfile:
    """Everything that differs between the desktop and mobile layouts."""

    card_width: float
    card_height: float
    horizontal_margin: float
    vertical_margin: float
    scale_ratio: float
    vertical_offset_ratio: float
    jitter: float
    initial_card_scale: float
    max_cards: int
    spawn_interval: int
    spawn_interval_min: int
    spawn_interval_max: int
    particle_count: int
    particle_margin: float
    particle_size_min: float
    particle_size_spread: float
    glow_size_min: float
    glow_size_spread: float


DESKTOP = DeviceProfile(
    card_width=220,
    card_height=140,
    horizontal_margin=16,
    vertical_margin=20,
    scale_ratio=0.98,
    vertical_offset_ratio=0.0,
    jitter=15,
    initial_card_scale=0.7,
    max_cards=185,
    spawn_interval=250,
    spawn_interval_min=140,
    spawn_interval_max=1200,
    particle_count=150,
    particle_margin=40,
    particle_size_min=2,
    particle_size_spread=3,
    glow_size_min=10,
    glow_size_spread=15,
)

MOBILE = DeviceProfile(
    card_width=140,
    card_height=100,
    horizontal_margin=12,
    vertical_margin=12,
    scale_ratio=0.82,
    vertical_offset_ratio=0.0,
    jitter=8,
    initial_card_scale=0.85,
    max_cards=185,
    spawn_interval=180,
    spawn_interval_min=200,
    spawn_interval_max=1400,
    particle_count=80,
    particle_margin=24,
    particle_size_min=1,
    particle_size_spread=2,
    glow_size_min=5,
    glow_size_spread=10,
)


@dataclass(frozen=True)
class WallConfig:
    debug: bool = False
    num_points: int = 185
    mobile_breakpoint: int = MOBILE_BREAKPOINT
    dark_theme: bool = True

    # Spawn pacing
    adaptive_spawn: bool = False
    use_idle_spawn: bool = False
    idle_threshold_ms: float = 6.0
    fps_lower: float = 48.0
    fps_upper: float = 58.0
    fps_window_ms: float = 1000.0
    slow_factor: float = 1.25
    fast_factor: float = 0.85
    drift_factor: float = 0.04
    burst_headroom: float = 1.1
    burst_max: int = 2
    slowdown_window: int = 10
    slowdown_start: float = 1.5
    slowdown_end: float = 3.0
    halo_delay_ms: float = 500.0
    eviction_limit: int = 10

    # Halo
    wave_coefficient: float = 0.15
    fade_in_frames: int = 60
    fade_out_frames: int = 80
    lifetime_min: float = 150.0
    lifetime_spread: float = 100.0
    pulse_amplitude: float = 0.15

    # Window
    transition_ms: float = 350.0
    resize_debounce_ms: float = 300.0

    desktop: DeviceProfile = field(default=DESKTOP)
    mobile: DeviceProfile = field(default=MOBILE)

    def profile(self, mobile: bool) -> DeviceProfile:
        return self.mobile if mobile else self.desktop


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_config(**overrides) -> WallConfig:
    """Build a WallConfig from defaults, the environment, then keyword overrides."""
    config = WallConfig(
        debug=_env_flag("HEARTWALL_DEBUG", False),
        num_points=int(os.getenv("HEARTWALL_POINTS", "185")),
        adaptive_spawn=_env_flag("HEARTWALL_ADAPTIVE", False),
        use_idle_spawn=_env_flag("HEARTWALL_IDLE_SPAWN", False),
        dark_theme=os.getenv("HEARTWALL_THEME", "dark").lower() != "light",
    )
    max_cards = os.getenv("HEARTWALL_MAX_CARDS")
    if max_cards:
        config = replace(
            config,
            desktop=replace(config.desktop, max_cards=int(max_cards)),
            mobile=replace(config.mobile, max_cards=int(max_cards)),
        )
    return replace(config, **overrides)
