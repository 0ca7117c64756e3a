import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import (
    Boolean, CheckConstraint, Column, DateTime, Float, ForeignKey, Index, Integer, String, Text, Uuid,
)
from sqlalchemy.orm import relationship

from .session import Base


class AuthProvider(str, Enum):
    LOCAL = "local"
    GOOGLE = "google"
    FACEBOOK = "facebook"
    FIREBASE = "firebase"


class Rarity(str, Enum):
    """How difficult a species is to spot, from common to legendary."""
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


class AnimalCategory(str, Enum):
    MAMMAL = "mammal"
    BIRD = "bird"
    REPTILE = "reptile"
    AMPHIBIAN = "amphibian"
    FISH = "fish"
    INSECT = "insect"
    ARACHNID = "arachnid"
    MOLLUSK = "mollusk"
    CRUSTACEAN = "crustacean"
    OTHER = "other"


class ConservationStatus(str, Enum):
    """IUCN Red List status."""
    NOT_EVALUATED = "NE"
    DATA_DEFICIENT = "DD"
    LEAST_CONCERN = "LC"
    NEAR_THREATENED = "NT"
    VULNERABLE = "VU"
    ENDANGERED = "EN"
    CRITICALLY_ENDANGERED = "CR"
    EXTINCT_IN_WILD = "EW"
    EXTINCT = "EX"


ENDANGERED_STATUSES = (
    ConservationStatus.VULNERABLE,
    ConservationStatus.ENDANGERED,
    ConservationStatus.CRITICALLY_ENDANGERED,
)


class VerificationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    AUTO_APPROVED = "auto_approved"


class WeatherCondition(str, Enum):
    SUNNY = "sunny"
    CLOUDY = "cloudy"
    RAINY = "rainy"
    SNOWY = "snowy"
    FOGGY = "foggy"
    STORM = "storm"
    UNKNOWN = "unknown"


class TimeOfDay(str, Enum):
    DAWN = "dawn"            # 5-7 AM
    MORNING = "morning"      # 7-11 AM
    NOON = "noon"            # 11 AM - 1 PM
    AFTERNOON = "afternoon"  # 1-5 PM
    EVENING = "evening"      # 5-8 PM
    DUSK = "dusk"            # 8-9 PM
    NIGHT = "night"          # 9 PM - 5 AM


class LocationType(str, Enum):
    WILDERNESS = "wilderness"
    URBAN = "urban"
    SUBURBAN = "suburban"
    ZOO = "zoo"
    SANCTUARY = "sanctuary"
    BEACH = "beach"
    MOUNTAIN = "mountain"
    FOREST = "forest"
    WETLAND = "wetland"
    RIVER = "river"
    LAKE = "lake"
    OTHER = "other"


class BadgeType(str, Enum):
    SPECIES = "species"
    LOCATION = "location"
    COUNT = "count"
    RARITY = "rarity"
    STREAK = "streak"
    SOCIAL = "social"
    CONSERVATION = "conservation"
    TIME = "time"
    SEASONAL = "seasonal"
    SPECIAL = "special"


class BadgeRarity(str, Enum):
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"
    DIAMOND = "diamond"


class User(Base):
    """User model for authentication."""
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(320), unique=True, index=True, nullable=False)
    username = Column(String(30), unique=True, index=True, nullable=True)
    hashed_password = Column(String(255), nullable=True)
    name = Column(String(100), default="")
    avatar = Column(Text, default="")
    provider = Column(String(20), default=AuthProvider.LOCAL.value, nullable=False)
    provider_id = Column(String(255), nullable=True, index=True)
    refresh_token = Column(Text, nullable=True)
    is_moderator = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    catches = relationship("Catch", back_populates="user", foreign_keys="Catch.user_id")


class Species(Base):
    """Reference data for every catchable animal."""
    __tablename__ = "species"
    __table_args__ = (
        CheckConstraint("difficulty_level >= 1 AND difficulty_level <= 10", name="ck_species_difficulty"),
        CheckConstraint("base_points >= 0", name="ck_species_base_points"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    common_name = Column(String(200), index=True, nullable=False)
    scientific_name = Column(String(200), unique=True, nullable=False)
    category = Column(String(20), index=True, nullable=False, default=AnimalCategory.OTHER.value)
    family = Column(String(100), default="")
    genus = Column(String(100), default="")
    description = Column(Text, default="")
    habitat = Column(String(200), default="")
    diet = Column(String(50), default="")
    conservation_status = Column(String(2), default=ConservationStatus.LEAST_CONCERN.value)

    # Game mechanics
    rarity = Column(String(20), default=Rarity.COMMON.value, nullable=False)
    difficulty_level = Column(Integer, default=1, nullable=False)
    base_points = Column(Integer, default=10, nullable=False)

    default_image_url = Column(Text, default="")
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    @property
    def is_endangered(self) -> bool:
        return self.conservation_status in {s.value for s in ENDANGERED_STATUSES}


class Location(Base):
    """A geographic point where catches are recorded."""
    __tablename__ = "locations"
    __table_args__ = (Index("idx_lat_lng", "latitude", "longitude"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)

    name = Column(String(200), default="")
    city = Column(String(100), default="", index=True)
    country = Column(String(100), default="", index=True)
    location_type = Column(String(20), default=LocationType.OTHER.value)

    # Aggregates recomputed from public catches
    catch_count = Column(Integer, default=0, nullable=False)
    species_count = Column(Integer, default=0, nullable=False)
    user_count = Column(Integer, default=0, nullable=False)
    last_catch_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    catches = relationship("Catch", back_populates="location")

    @property
    def coordinates(self) -> str:
        return f"{self.latitude:.6f},{self.longitude:.6f}"


class Catch(Base):
    """A user's sighting of a species at a location."""
    __tablename__ = "catches"
    __table_args__ = (
        CheckConstraint("user_rating IS NULL OR (user_rating >= 1 AND user_rating <= 5)", name="ck_catch_rating"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    species_id = Column(Uuid, ForeignKey("species.id"), nullable=False, index=True)
    location_id = Column(Uuid, ForeignKey("locations.id"), nullable=False, index=True)

    # User-generated content
    user_photo_url = Column(Text, nullable=False)
    user_notes = Column(Text, default="")
    user_rating = Column(Integer, nullable=True)

    # Verification
    verification_status = Column(String(20), default=VerificationStatus.PENDING.value, nullable=False)
    verified_by = Column(Uuid, ForeignKey("users.id"), nullable=True)
    verified_at = Column(DateTime, nullable=True)
    verification_notes = Column(Text, default="")

    # Environmental conditions
    weather = Column(String(20), nullable=True)
    time_of_day = Column(String(20), nullable=True)
    temperature = Column(Float, nullable=True)

    # Scoring, fixed at creation
    points_awarded = Column(Integer, default=0, nullable=False)
    is_first_catch = Column(Boolean, default=False, nullable=False)
    combo_multiplier = Column(Float, default=1.0, nullable=False)

    is_public = Column(Boolean, default=True, nullable=False)
    caught_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="catches", foreign_keys=[user_id])
    species = relationship("Species")
    location = relationship("Location", back_populates="catches")


class Badge(Base):
    """An achievement users can earn."""
    __tablename__ = "badges"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(Text, nullable=False, default="")
    short_desc = Column(String(200), nullable=False, default="")
    badge_type = Column(String(20), nullable=False, index=True)
    badge_rarity = Column(String(20), default=BadgeRarity.BRONZE.value)
    icon_url = Column(Text, default="")
    required_count = Column(Integer, nullable=True)
    required_rarity = Column(String(20), nullable=True)
    points_awarded = Column(Integer, default=0)
    is_secret = Column(Boolean, default=False)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)


class UserBadge(Base):
    """Progress of one user towards one badge."""
    __tablename__ = "user_badges"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    badge_id = Column(Uuid, ForeignKey("badges.id"), nullable=False, index=True)
    progress = Column(Integer, default=0, nullable=False)
    max_progress = Column(Integer, default=1, nullable=False)
    earned_at = Column(DateTime, nullable=True)
    related_catch_id = Column(Uuid, ForeignKey("catches.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    badge = relationship("Badge")

    @property
    def is_earned(self) -> bool:
        return self.earned_at is not None

    @property
    def is_completed(self) -> bool:
        return self.progress >= self.max_progress

    @property
    def progress_percentage(self) -> float:
        """Progress as a percentage, capped at 100."""
        if not self.max_progress:
            return 0.0
        return min(self.progress / self.max_progress * 100, 100.0)
