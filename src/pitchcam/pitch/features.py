"""Football pitch dimensions and named calibration features (metres)"""
from dataclasses import dataclass
from typing import Dict, List

# FIFA standard pitch (metres)
PITCH_LENGTH = 105.0
PITCH_WIDTH = 68.0

PITCH_DIMENSIONS = {
    'length': PITCH_LENGTH,
    'width': PITCH_WIDTH,
    'penalty_area_depth': 16.5,
    'penalty_area_width': 40.3,
    'goal_area_depth': 5.5,
    'goal_area_width': 18.3,
    'penalty_spot_distance': 11.0,
    'goal_width': 7.32,
}

@dataclass(frozen=True)
class PitchFeature:
    """A pitch landmark a user can click on to create a correspondence"""
    name: str
    x: float  # along the length, 0 at the left goal line
    y: float  # along the width, 0 at the top touchline
    label: str


def _build_features() -> Dict[str, PitchFeature]:
    # Origin (0, 0) is the top-left corner of the pitch
    half_length = PITCH_LENGTH / 2
    half_width = PITCH_WIDTH / 2
    penalty_top = half_width - PITCH_DIMENSIONS['penalty_area_width'] / 2
    penalty_bottom = half_width + PITCH_DIMENSIONS['penalty_area_width'] / 2
    goal_area_top = half_width - PITCH_DIMENSIONS['goal_area_width'] / 2
    goal_area_bottom = half_width + PITCH_DIMENSIONS['goal_area_width'] / 2
    post_top = half_width - PITCH_DIMENSIONS['goal_width'] / 2
    post_bottom = half_width + PITCH_DIMENSIONS['goal_width'] / 2
    box = PITCH_DIMENSIONS['penalty_area_depth']
    six = PITCH_DIMENSIONS['goal_area_depth']
    spot = PITCH_DIMENSIONS['penalty_spot_distance']
    right = PITCH_LENGTH

    table = [
        # Corners
        ('top_left_corner', 0.0, 0.0, 'Top Left Corner'),
        ('top_right_corner', right, 0.0, 'Top Right Corner'),
        ('bottom_left_corner', 0.0, PITCH_WIDTH, 'Bottom Left Corner'),
        ('bottom_right_corner', right, PITCH_WIDTH, 'Bottom Right Corner'),

        # Centre
        ('center_spot', half_length, half_width, 'Center Spot'),
        ('center_line_top', half_length, 0.0, 'Center Line Top'),
        ('center_line_bottom', half_length, PITCH_WIDTH, 'Center Line Bottom'),

        # Left penalty area
        ('left_penalty_top', box, penalty_top, 'Left Penalty Top'),
        ('left_penalty_bottom', box, penalty_bottom, 'Left Penalty Bottom'),
        ('left_penalty_spot', spot, half_width, 'Left Penalty Spot'),
        ('left_goal_area_top', six, goal_area_top, 'Left Goal Area Top'),
        ('left_goal_area_bottom', six, goal_area_bottom, 'Left Goal Area Bottom'),
        ('left_goal_top', 0.0, post_top, 'Left Goal Post Top'),
        ('left_goal_bottom', 0.0, post_bottom, 'Left Goal Post Bottom'),

        # Right penalty area
        ('right_penalty_top', right - box, penalty_top, 'Right Penalty Top'),
        ('right_penalty_bottom', right - box, penalty_bottom, 'Right Penalty Bottom'),
        ('right_penalty_spot', right - spot, half_width, 'Right Penalty Spot'),
        ('right_goal_area_top', right - six, goal_area_top, 'Right Goal Area Top'),
        ('right_goal_area_bottom', right - six, goal_area_bottom, 'Right Goal Area Bottom'),
        ('right_goal_top', right, post_top, 'Right Goal Post Top'),
        ('right_goal_bottom', right, post_bottom, 'Right Goal Post Bottom'),

        # Penalty box corners
        ('left_penalty_box_tl', 0.0, penalty_top, 'Left Penalty Box TL'),
        ('left_penalty_box_tr', box, penalty_top, 'Left Penalty Box TR'),
        ('left_penalty_box_bl', 0.0, penalty_bottom, 'Left Penalty Box BL'),
        ('left_penalty_box_br', box, penalty_bottom, 'Left Penalty Box BR'),
        ('right_penalty_box_tl', right - box, penalty_top, 'Right Penalty Box TL'),
        ('right_penalty_box_tr', right, penalty_top, 'Right Penalty Box TR'),
        ('right_penalty_box_bl', right - box, penalty_bottom, 'Right Penalty Box BL'),
        ('right_penalty_box_br', right, penalty_bottom, 'Right Penalty Box BR'),

        # Goal area corners (6-yard box)
        ('left_goal_area_tl', 0.0, goal_area_top, 'Left Goal Area TL'),
        ('left_goal_area_tr', six, goal_area_top, 'Left Goal Area TR'),
        ('left_goal_area_bl', 0.0, goal_area_bottom, 'Left Goal Area BL'),
        ('left_goal_area_br', six, goal_area_bottom, 'Left Goal Area BR'),
        ('right_goal_area_tl', right - six, goal_area_top, 'Right Goal Area TL'),
        ('right_goal_area_tr', right, goal_area_top, 'Right Goal Area TR'),
        ('right_goal_area_bl', right - six, goal_area_bottom, 'Right Goal Area BL'),
        ('right_goal_area_br', right, goal_area_bottom, 'Right Goal Area BR'),
    ]

    return {
        name: PitchFeature(name=name, x=round(x, 3), y=round(y, 3), label=label)
        for name, x, y, label in table
    }


PITCH_FEATURES: Dict[str, PitchFeature] = _build_features()


def get_feature(name: str) -> PitchFeature:
    """Look up a pitch feature by name"""
    if name not in PITCH_FEATURES:
        raise ValueError(f"Unknown pitch feature: {name}")
    return PITCH_FEATURES[name]


def list_feature_names() -> List[str]:
    return list(PITCH_FEATURES.keys())
