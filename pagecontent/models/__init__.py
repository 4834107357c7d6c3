from .locale import Locale
from .page import Page, PageTranslation, STATUS_DRAFT, STATUS_PUBLISHED
from .settings import SiteSettings, SiteSettingsTranslation
from .partner import Partner, PartnerTranslation
from .gallery import GalleryGroup
from .user import User
