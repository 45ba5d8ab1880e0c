from dochost.models.tenant import Tenant
from dochost.models.page import Page
from dochost.models.credential import Credential, Environment
