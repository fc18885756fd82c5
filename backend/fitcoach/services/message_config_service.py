"""
MessageConfigService - per-tenant automatic message settings.
"""

import logging
from typing import Dict, Optional, Tuple

from fitcoach.extensions import db
from fitcoach.models.auto_message_config import AutoMessageConfig, DEFAULT_TEXTS

logger = logging.getLogger(__name__)


class MessageConfigService:

    @staticmethod
    def get_or_default(tenant_id) -> AutoMessageConfig:
        """
        Config of a tenant, or an unsaved instance holding the defaults.

        Used by background jobs and hooks that only read the settings.
        """
        config = AutoMessageConfig.query.filter_by(tenant_id=tenant_id).first()
        if config is not None:
            return config

        defaults = {
            column.name: column.default.arg
            for column in AutoMessageConfig.__table__.columns
            if column.default is not None and column.default.is_scalar
        }
        return AutoMessageConfig(tenant_id=tenant_id, **defaults)

    @staticmethod
    def get_or_create(tenant_id) -> Tuple[Optional[AutoMessageConfig], Optional[str]]:
        """Fetch the tenant's config, creating it with defaults on first access."""
        try:
            config = AutoMessageConfig.query.filter_by(tenant_id=tenant_id).first()
            if config is None:
                config = AutoMessageConfig(tenant_id=tenant_id, **DEFAULT_TEXTS)
                db.session.add(config)
                db.session.commit()
                logger.info(f"Auto-message config created with defaults for tenant {tenant_id}")
            return config, None

        except Exception as e:
            db.session.rollback()
            logger.error(f"Error loading message config: {str(e)}", exc_info=True)
            return None, f'Failed to load message config: {str(e)}'

    @staticmethod
    def update(tenant_id, data: Dict) -> Tuple[Optional[AutoMessageConfig], Optional[str]]:
        config, error = MessageConfigService.get_or_create(tenant_id)
        if error:
            return None, error

        try:
            config.update_from_dict(data)
            db.session.commit()
            logger.info(f"Auto-message config updated for tenant {tenant_id}: {sorted(data)}")
            return config, None

        except Exception as e:
            db.session.rollback()
            logger.error(f"Error updating message config: {str(e)}", exc_info=True)
            return None, f'Failed to update message config: {str(e)}'
