from .user import User
from .trainer_customer import TrainerCustomer
from .meal_plan import MealPlan
from .meal_plan_assignment import MealPlanAssignment
from .customer_progress import CustomerProgress
from .customer_invitation import CustomerInvitation

__all__ = [
    "User",
    "TrainerCustomer",
    "MealPlan", "MealPlanAssignment",
    "CustomerProgress",
    "CustomerInvitation",
]
