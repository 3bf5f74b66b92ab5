from typing import List, Tuple

import pytest

from animcore.actions.keyframe_actions import KeyframeActions
from animcore.actions.layer_actions import LayerActions
from animcore.interaction.gesture import GestureController
from animcore.session import EditorSession


@pytest.fixture
def notices() -> List[Tuple[str, str]]:
    return []


@pytest.fixture
def session(notices) -> EditorSession:
    return EditorSession(notifier=lambda message, level: notices.append((message, level)))


@pytest.fixture
def keyframes(session) -> KeyframeActions:
    return KeyframeActions(session)


@pytest.fixture
def layers(session) -> LayerActions:
    return LayerActions(session)


@pytest.fixture
def gestures(session, keyframes) -> GestureController:
    return GestureController(session, keyframes)
