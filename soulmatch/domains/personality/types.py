"""성격 시그니처 타입 정의"""

from dataclasses import dataclass


@dataclass(frozen=True)
class PersonalityVector:
    """시그니처를 펼친 3차원 성격 벡터

    Attributes:
        hue: 형이상학적 핵심 (원형 차원, 0~360 도. 0과 360은 같은 방향)
        manifested: 드러난 자아 (선형 차원, 0~255)
        soul: 내면의 깊이 (선형 차원, 0~255)
    """

    hue: float
    manifested: int
    soul: int

    def __post_init__(self) -> None:
        if not 0 <= self.hue <= 360:
            raise ValueError(f"hue must be in [0, 360], got {self.hue}")
        for name in ("manifested", "soul"):
            value = getattr(self, name)
            if not 0 <= value <= 255:
                raise ValueError(f"{name} must be in [0, 255], got {value}")

    def as_dict(self) -> dict[str, float]:
        return {
            "hue": self.hue,
            "manifested": self.manifested,
            "soul": self.soul,
        }


@dataclass(frozen=True)
class Archetype:
    """원형 차원 위의 8개 기준 원형 중 하나"""

    angle: int
    name: str
    title: str
    description: str
