"""Bulk seeding of the default recurring expense catalogue"""
import logging
from dataclasses import dataclass
from datetime import date, timedelta

from cashflow.config import Settings, get_settings
from cashflow.domain.errors import ValidationError
from cashflow.domain.recurrence import add_months, last_day_of_month
from cashflow.domain.recurrence_rule import FREQ_MONTHLY, FREQ_WEEKLY, RecurrenceRule, js_weekday
from cashflow.application.generation import GenerateFromRulesUseCase
from cashflow.infrastructure.repositories.base import BudgetStore
from cashflow.utils.clock import today

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeedRule:
    title: str
    amount: int
    category: str
    frequency: str
    day: int  # weekday 0..6 (0=Sunday) for weekly, day of month otherwise
    interval: int = 1
    description: str = ""


DEFAULT_CATALOGUE: tuple[SeedRule, ...] = (
    SeedRule("Arrendamiento", 2482000, "Arrendamiento", FREQ_MONTHLY, 12),
    SeedRule("Nómina Cocina (Q1)", 1019160, "Gastos de Nómina", FREQ_MONTHLY, 15),
    SeedRule("Nómina Cocina (Q2)", 1019160, "Gastos de Nómina", FREQ_MONTHLY, 30),
    SeedRule("Nómina Barman (Q1)", 1019160, "Gastos de Nómina", FREQ_MONTHLY, 15),
    SeedRule("Nómina Barman (Q2)", 1019160, "Gastos de Nómina", FREQ_MONTHLY, 30),
    SeedRule("Nómina Admon (Q1)", 4500000, "Gastos de Nómina", FREQ_MONTHLY, 5),
    SeedRule("Nómina Admon (Q2)", 4500000, "Gastos de Nómina", FREQ_MONTHLY, 20),
    SeedRule("Nómina David (Q1)", 150000, "Gastos de Nómina", FREQ_MONTHLY, 5),
    SeedRule("Nómina David (Q2)", 150000, "Gastos de Nómina", FREQ_MONTHLY, 20),
    SeedRule("Turnos y Propinas", 1600000, "Gastos de Nómina", FREQ_WEEKLY, 1),
    SeedRule("Seguridad Social", 1560000, "Gastos de Nómina", FREQ_MONTHLY, 4),
    SeedRule("Karaoke", 420000, "Gastos Música", FREQ_WEEKLY, 1),
    SeedRule("Vie Musica", 350000, "Gastos Música", FREQ_WEEKLY, 5),
    SeedRule("Sabad Musica", 300000, "Gastos Música", FREQ_WEEKLY, 6, interval=2),
    SeedRule("Asesoría Financiera", 700000, "Honorarios", FREQ_MONTHLY, 20),
    SeedRule("INC", 1000000, "Impuestos", FREQ_MONTHLY, 19, interval=2),
    SeedRule("Industria y Comercio", 250000, "Impuestos", FREQ_MONTHLY, 20, interval=2),
    SeedRule("Banco Agrario CR", 1150000, "Obligaciones Financieras", FREQ_MONTHLY, 13),
    SeedRule("Banco Agrario TDC", 250000, "Obligaciones Financieras", FREQ_MONTHLY, 10),
    SeedRule("Banco Pichincha", 1027000, "Obligaciones Financieras", FREQ_MONTHLY, 22),
    SeedRule("Banco Finandina", 468000, "Obligaciones Financieras", FREQ_MONTHLY, 16),
    SeedRule("A. Castaño", 1500000, "Obligaciones Financieras", FREQ_MONTHLY, 15),
    SeedRule("Agua", 450000, "Servicios Públicos", FREQ_MONTHLY, 20),
    SeedRule("Energía", 1000000, "Servicios Públicos", FREQ_MONTHLY, 20),
    SeedRule("Gas", 350000, "Servicios Públicos", FREQ_MONTHLY, 20),
    SeedRule("Internet", 170000, "Servicios Públicos", FREQ_MONTHLY, 20),
    SeedRule("Datafonos", 350000, "Servicios Públicos", FREQ_MONTHLY, 1),
    SeedRule("Seguros", 220000, "Otros", FREQ_MONTHLY, 15),
)


def seed_start_date(entry: SeedRule, ref: date) -> date:
    """
    Weekly: the next matching weekday strictly after `ref`.
    Monthly/yearly: the anchor day in the month of `ref`, clamped.
    """
    if entry.frequency == FREQ_WEEKLY:
        days_until = (entry.day - js_weekday(ref)) % 7 or 7
        return ref + timedelta(days=days_until)
    return ref.replace(day=min(entry.day, last_day_of_month(ref.year, ref.month)))


@dataclass(frozen=True)
class SeedResult:
    rules_created: int
    commitments_generated: int


class SeedRecurringExpensesUseCase:
    def __init__(
        self,
        store: BudgetStore,
        settings: Settings | None = None,
        catalogue: tuple[SeedRule, ...] = DEFAULT_CATALOGUE,
    ):
        self.store = store
        self.settings = settings or get_settings()
        self.catalogue = catalogue

    def execute(self, force: bool = False) -> SeedResult:
        if not force and self.store.list_rules():
            raise ValidationError("Recurrence rules already exist; pass force to seed anyway")

        ref = today()
        rules = [
            RecurrenceRule.create(
                title=entry.title,
                amount=entry.amount,
                frequency=entry.frequency,
                start_date=seed_start_date(entry, ref),
                category=entry.category,
                day_to_send=entry.day,
                interval=entry.interval,
                description=entry.description or entry.title,
            )
            for entry in self.catalogue
        ]

        limit = add_months(ref, self.settings.MATERIALIZATION_HORIZON_MONTHS)
        with self.store.atomic():
            for rule in rules:
                self.store.insert_rule(rule)
            generated = 0
            for rule in rules:
                generated += GenerateFromRulesUseCase(self.store, self.settings).execute(limit, rule.id)

        logger.info("Seed: %d rule(s) created, %d commitment(s) generated", len(rules), generated)
        return SeedResult(rules_created=len(rules), commitments_generated=generated)
