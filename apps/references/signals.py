from django.db.models.signals import post_delete, post_save

from . import models
from .services import invalidate

# Cached list kinds that render each model, directly or through a relation
CACHED_MODELS = {
    models.Location: ('locations', 'districts', 'hotels'),
    models.District: ('districts', 'hotels'),
    models.Hotel: ('hotels',),
    models.LocationSeason: ('location_seasons',),
    models.Currency: ('currencies',),
    models.CarBrand: ('brands', 'models', 'car_templates'),
    models.CarModel: ('models', 'car_templates'),
    models.CarBodyType: ('body_types', 'car_templates'),
    models.CarFuelType: ('fuel_types', 'car_templates'),
    models.CarColor: ('colors',),
    models.CarTemplate: ('car_templates',),
    models.PaymentStatus: ('payment_statuses',),
    models.PaymentType: ('payment_types',),
    models.Citizenship: ('citizenships',),
}


def _invalidate_reference_cache(sender, **kwargs):
    for kind in CACHED_MODELS[sender]:
        invalidate(kind)


def connect():
    for model in CACHED_MODELS:
        post_save.connect(_invalidate_reference_cache, sender=model,
                          dispatch_uid=f'references_cache_save_{model.__name__}')
        post_delete.connect(_invalidate_reference_cache, sender=model,
                            dispatch_uid=f'references_cache_delete_{model.__name__}')
