import logging

from celery import shared_task

from apps.companies.models import Company
from .services.car_service import cars_needing_attention

logger = logging.getLogger(__name__)


@shared_task(bind=True, ignore_result=True)
def report_fleet_attention(self, within_days=30):
    """Log, per active company, the cars due for an oil change or document renewal."""
    flagged = 0
    for company in Company.objects.filter(is_active=True, deleted_at__isnull=True):
        try:
            cars = cars_needing_attention(company, within_days=within_days)
        except Exception as e:
            logger.error(f"Error checking fleet attention for company {company.pk}: {e}")
            continue
        if cars:
            flagged += len(cars)
            plates = ', '.join(car['license_plate'] for car in cars)
            logger.warning(f"Company {company.name} (id={company.pk}) has {len(cars)} car(s) needing attention: {plates}")
    logger.info(f"Fleet attention check finished: {flagged} car(s) flagged")
    return flagged
