from guestfeedback.models.tenant import Hotel, SubscriptionPlan, SubscriptionStatus
from guestfeedback.models.user import User, UserRole, UserStatus
from guestfeedback.models.web_session import WebSession
from guestfeedback.models.form import Form, FormField, FieldType, SemanticRole
from guestfeedback.models.review import Review, ReviewStatus
from guestfeedback.models.notification import Notification
from guestfeedback.models.payment_method import PaymentMethod
