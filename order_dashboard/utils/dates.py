"""
Utilidades de fechas
Las fechas se guardan en UTC naive; "hoy" se calcula en la zona horaria del local
"""
from datetime import datetime, timedelta, timezone, date
from zoneinfo import ZoneInfo


def utcnow():
    """Fecha/hora actual en UTC sin tzinfo (formato de las columnas)"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def local_day_start(now, tz_name):
    """
    Medianoche local del día de `now`, expresada en UTC naive.

    Args:
        now: datetime UTC naive
        tz_name: zona horaria del local (ej: America/Argentina/Buenos_Aires)
    """
    tz = ZoneInfo(tz_name)
    local_now = now.replace(tzinfo=timezone.utc).astimezone(tz)
    local_midnight = local_now.replace(hour=0, minute=0, second=0, microsecond=0)
    return local_midnight.astimezone(timezone.utc).replace(tzinfo=None)


def minutes_between(start, end):
    """Minutos transcurridos entre dos datetimes"""
    return (end - start).total_seconds() / 60


def get_week_start(dt):
    """Obtiene el lunes de la semana para una fecha dada. Siempre devuelve un date."""
    if isinstance(dt, datetime):
        dt = dt.date()
    elif not isinstance(dt, date):
        dt = datetime.fromisoformat(str(dt)).date()

    # 0 = lunes, 6 = domingo
    return dt - timedelta(days=dt.weekday())


def to_local_date(dt, tz_name):
    """Fecha local (date) de un datetime UTC naive"""
    return dt.replace(tzinfo=timezone.utc).astimezone(ZoneInfo(tz_name)).date()
