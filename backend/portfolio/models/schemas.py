"""
Modulo de esquemas (schemas) de datos de la API.

Este archivo define la ESTRUCTURA EXACTA de los datos que entran a la API
del portafolio, usando Pydantic. Es el "contrato" entre el panel de
administracion y el backend.

Convenciones:
-------------
- Todos los strings se recortan (strip) antes de validar longitudes:
  "  Hola  " cuenta como "Hola" (4 caracteres).
- Las reglas (longitudes minimas/maximas, patrones, rangos) son las
  mismas que aplica el formulario del panel, para que un error del
  backend nunca sorprenda al usuario.
- Los modelos *Update agregan el campo `_id` del documento. En Python
  los atributos que empiezan con "_" son privados para Pydantic, asi que
  el campo se llama `id` y se lee del JSON con el alias "_id".
- Un error de validacion se responde con HTTP 400 (ver errors.py).
"""

from typing import Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


def _is_http_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


class PortfolioModel(BaseModel):
    """Base comun: recorta espacios en todos los strings."""

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)


class UpdateMixin(PortfolioModel):
    """Agrega el `_id` opcional de los PUT; su ausencia se reporta en la ruta."""

    id: Optional[str] = Field(default=None, alias="_id")


# ---------- Autenticacion y contacto ----------


class LoginRequest(PortfolioModel):
    username: str = Field(min_length=3, max_length=50, pattern=r"^[a-zA-Z0-9_-]+$")
    password: str = Field(min_length=6, max_length=100)


class ContactRequest(PortfolioModel):
    """
    Formulario publico de contacto.

    El email se normaliza a minusculas: "Ana@Mail.COM" -> "ana@mail.com".
    """

    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    subject: str = Field(min_length=3, max_length=200)
    message: str = Field(min_length=10, max_length=5000)

    @field_validator("email", mode="before")
    @classmethod
    def lowercase_email(cls, value):
        if isinstance(value, str):
            value = value.strip().lower()
            if len(value) > 100:
                raise ValueError("Email must not exceed 100 characters")
        return value


class DeleteImageRequest(PortfolioModel):
    publicId: Optional[str] = None


# ---------- Contenido del portafolio ----------


class ProjectIn(PortfolioModel):
    title: str = Field(min_length=3, max_length=200)
    description: str = Field(min_length=10, max_length=2000)
    tags: list[str] = Field(min_length=1, max_length=10)
    image: str = Field(max_length=500)
    githubUrl: Optional[str] = Field(default=None, max_length=500)
    liveUrl: Optional[str] = Field(default=None, max_length=500)
    featured: bool = False

    @field_validator("tags")
    @classmethod
    def strip_tags(cls, value: list[str]) -> list[str]:
        return [tag.strip() for tag in value]

    @field_validator("image")
    @classmethod
    def image_must_be_url(cls, value: str) -> str:
        if not _is_http_url(value):
            raise ValueError("Image must be a valid URL")
        return value

    @field_validator("githubUrl", "liveUrl")
    @classmethod
    def optional_url(cls, value: Optional[str]) -> Optional[str]:
        # "" significa "sin enlace" y se acepta tal cual.
        if value and not _is_http_url(value):
            raise ValueError("URL must be valid")
        return value


class ProjectUpdate(UpdateMixin, ProjectIn):
    pass


class ExperienceIn(PortfolioModel):
    title: str = Field(min_length=3, max_length=200)
    company: str = Field(min_length=2, max_length=200)
    description: str = Field(min_length=10, max_length=2000)
    date: str = Field(min_length=3, max_length=100)
    location: str = Field(min_length=2, max_length=200)
    current: bool = False


class ExperienceUpdate(UpdateMixin, ExperienceIn):
    pass


class EducationIn(PortfolioModel):
    degree: str = Field(min_length=3, max_length=200)
    field: str = Field(min_length=3, max_length=200)
    institution: str = Field(min_length=2, max_length=200)
    achievements: Optional[str] = Field(default=None, max_length=1000)
    date: str = Field(min_length=3, max_length=100)
    location: str = Field(min_length=2, max_length=200)
    current: bool = False


class EducationUpdate(UpdateMixin, EducationIn):
    pass


class Skill(PortfolioModel):
    name: str = Field(min_length=1, max_length=100)
    percentage: int = Field(ge=0, le=100)


class SkillCategoryIn(PortfolioModel):
    title: str = Field(min_length=2, max_length=100)
    icon: str = Field(min_length=1, max_length=50)
    skills: list[Skill] = Field(min_length=1, max_length=20)
    order: int = Field(ge=1)


class SkillCategoryUpdate(UpdateMixin, SkillCategoryIn):
    pass


class InterestIn(PortfolioModel):
    title: str = Field(min_length=2, max_length=100)
    icon: str = Field(min_length=1, max_length=50)
    description: str = Field(min_length=10, max_length=1000)
    order: int = Field(ge=1)


class InterestUpdate(UpdateMixin, InterestIn):
    pass
