from .car_service import create_car, update_car, soft_delete_car, record_maintenance, cars_needing_attention
from .contract_service import create_contract, update_contract, close_contract
from .payment_service import create_payment, update_payment, delete_payment
from .booking_service import create_booking, update_booking_status
from .task_service import create_tasks, update_task, delete_task, task_assignees
from .calendar_service import create_event, update_event, delete_event
