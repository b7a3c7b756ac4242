import json
import re

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.utils import timezone

from quizbank.infrastructure.models import Difficulty, Tag, Theme

# ========= catálogo por defecto =========
DEFAULT_DIFFICULTIES = [
    {"name": "Facile", "level": 1, "color": "#4caf50"},
    {"name": "Moyen", "level": 2, "color": "#8bc34a"},
    {"name": "Difficile", "level": 3, "color": "#ff9800"},
    {"name": "Très difficile", "level": 4, "color": "#f44336"},
    {"name": "Expert", "level": 5, "color": "#9c27b0"},
]

DEFAULT_THEMES = [
    {"name": "JavaScript", "description": "Langage, runtime et écosystème", "color": "#f7df1e"},
    {"name": "Python", "description": "Langage et bibliothèque standard", "color": "#3776ab"},
    {"name": "Histoire", "description": "Grandes dates et personnages", "color": "#795548"},
    {"name": "Géographie", "description": "Pays, capitales et reliefs", "color": "#2196f3"},
]


# ========= normalizadores / upsert =========
def _norm_name(s: str) -> str:
    s = (s or "").replace("\t", " ").strip()
    return re.sub(r"\s+", " ", s)


def _upsert_difficulties(items: list[dict]) -> tuple[int, int]:
    new = upd = 0
    for raw in items:
        name = _norm_name(raw.get("name", ""))
        level = int(raw.get("level", 0))
        if not name or not 1 <= level <= 5:
            raise CommandError(f"Dificultad inválida: {raw!r}")
        _, created = Difficulty.objects.update_or_create(
            level=level,
            defaults={"name": name, "color": raw.get("color")},
        )
        if created:
            new += 1
        else:
            upd += 1
    return new, upd


def _upsert_themes(items: list[dict]) -> tuple[int, int]:
    new = upd = 0
    for raw in items:
        name = _norm_name(raw.get("name", ""))
        if not 2 <= len(name) <= 100:
            raise CommandError(f"Tema inválido: {raw!r}")
        obj = Theme.objects.filter(name__iexact=name).first()
        if obj:
            obj.description = raw.get("description", obj.description)
            obj.color = raw.get("color", obj.color)
            obj.updated_at = timezone.now()
            obj.save(update_fields=["description", "color", "updated_at"])
            upd += 1
        else:
            Theme.objects.create(name=name, description=raw.get("description"), color=raw.get("color"))
            new += 1
    return new, upd


def _upsert_tags(names: list[str]) -> int:
    new = 0
    for raw in names:
        name = _norm_name(raw)
        if name and not Tag.objects.filter(name__iexact=name).exists():
            Tag.objects.create(name=name)
            new += 1
    return new


# ========= comando =========
class Command(BaseCommand):
    help = "Crea o actualiza temas, dificultades y etiquetas (catálogo por defecto o desde un JSON)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--file",
            type=str,
            default=None,
            help='JSON con claves opcionales "themes", "difficulties" y "tags"',
        )
        parser.add_argument("--dry-run", action="store_true", help="Solo muestra conteos; no escribe en DB")

    def handle(self, *args, **opts):
        payload = {"themes": DEFAULT_THEMES, "difficulties": DEFAULT_DIFFICULTIES, "tags": []}
        if opts["file"]:
            try:
                with open(opts["file"], encoding="utf-8") as fh:
                    payload.update(json.load(fh))
            except (OSError, ValueError) as e:
                raise CommandError(f"No pude leer el catálogo: {e}")

        themes = payload.get("themes") or []
        difficulties = payload.get("difficulties") or []
        tags = payload.get("tags") or []

        if opts["dry_run"]:
            self.stdout.write(
                f"[dry-run] temas={len(themes)} dificultades={len(difficulties)} etiquetas={len(tags)}"
            )
            return

        with transaction.atomic():
            d_new, d_upd = _upsert_difficulties(difficulties)
            t_new, t_upd = _upsert_themes(themes)
            g_new = _upsert_tags(tags)

        self.stdout.write(self.style.SUCCESS(
            f"Dificultades: +{d_new} / ~{d_upd} | Temas: +{t_new} / ~{t_upd} | Etiquetas: +{g_new}"
        ))
