from .client_service import create_client, update_client, search_clients, find_user_by_email, placeholder_email
from .manager_service import create_manager, update_manager, managers_for_company
from .profile_service import update_profile
from .registration_service import register_user, confirm_email
