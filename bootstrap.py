import logging

from tuition.db import Base, engine
import tuition.models  # noqa: F401


logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s %(name)s %(message)s')
logger = logging.getLogger('bootstrap')


def main():
    Base.metadata.create_all(bind=engine)
    logger.info('Bootstrap created tables: %s', sorted(Base.metadata.tables))


if __name__ == '__main__':
    main()
