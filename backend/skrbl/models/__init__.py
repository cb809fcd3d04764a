from .job import AgentJob
from .content import AgentLog, SocialContent, BrandingContent
from .lead import Lead, LeadActivity
from .email import EmailSequenceEnrollment, EmailQueueItem, EmailLog
from .user import UserSettings, UserRole
from .system_log import SystemLog
from .contact import PercyContact, SmsVerification
from .workflow_log import WorkflowLog
