from sqlalchemy import Column, Float, ForeignKey, Integer, Table, Text, text

from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()
metadata = Base.metadata


class Tenants(Base):
    __tablename__ = 'tenants'

    name = Column(Text, nullable=False)
    slug = Column(Text, nullable=False, unique=True)
    id = Column(Integer, primary_key=True)
    is_active = Column(Integer, nullable=False, server_default=text('1'))
    created_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))

    business_hours = relationship('BusinessHours', back_populates='tenant', uselist=False)
    professionals = relationship('Professionals', back_populates='tenant')
    services = relationship('Services', back_populates='tenant')
    appointments = relationship('Appointments', back_populates='tenant')
    blocked_times = relationship('BlockedTimes', back_populates='tenant')


class BusinessHours(Base):
    __tablename__ = 'business_hours'

    tenant_id = Column(ForeignKey('tenants.id', ondelete='CASCADE'), nullable=False, unique=True)
    open_time = Column(Text, nullable=False, server_default=text("'08:00'"))
    close_time = Column(Text, nullable=False, server_default=text("'20:00'"))
    slot_interval = Column(Integer, nullable=False, server_default=text('20'))
    open_days = Column(Text, nullable=False, server_default=text('\'["mon","tue","wed","thu","fri","sat"]\''))
    id = Column(Integer, primary_key=True)
    lunch_start = Column(Text)
    lunch_end = Column(Text)
    use_custom_hours = Column(Integer, nullable=False, server_default=text('0'))
    custom_hours = Column(Text)  # {"sat": {"open": "09:00", "close": "14:00"}, ...}
    updated_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))

    tenant = relationship('Tenants', back_populates='business_hours')


class Professionals(Base):
    __tablename__ = 'professionals'

    tenant_id = Column(ForeignKey('tenants.id', ondelete='CASCADE'), nullable=False)
    name = Column(Text, nullable=False)
    id = Column(Integer, primary_key=True)
    is_active = Column(Integer, nullable=False, server_default=text('1'))

    tenant = relationship('Tenants', back_populates='professionals')
    appointments = relationship('Appointments', back_populates='professional')
    blocked_times = relationship('BlockedTimes', back_populates='professional')


class Services(Base):
    __tablename__ = 'services'

    tenant_id = Column(ForeignKey('tenants.id', ondelete='CASCADE'), nullable=False)
    name = Column(Text, nullable=False)
    duration_min = Column(Integer, nullable=False)
    price = Column(Float, nullable=False, server_default=text('0'))
    id = Column(Integer, primary_key=True)
    is_active = Column(Integer, nullable=False, server_default=text('1'))

    tenant = relationship('Tenants', back_populates='services')


t_appointment_services = Table(
    'appointment_services', metadata,
    Column('appointment_id', ForeignKey('appointments.id', ondelete='CASCADE'), nullable=False),
    Column('service_id', ForeignKey('services.id'), nullable=False),
)


class Appointments(Base):
    __tablename__ = 'appointments'

    tenant_id = Column(ForeignKey('tenants.id', ondelete='CASCADE'), nullable=False)
    professional_id = Column(ForeignKey('professionals.id', ondelete='CASCADE'), nullable=False)
    starts_at = Column(Text, nullable=False)  # ISO-8601 with offset
    status = Column(Text, nullable=False, server_default=text("'pending'"))
    id = Column(Integer, primary_key=True)
    client_name = Column(Text)
    client_phone = Column(Text)
    total_price = Column(Float)
    notes = Column(Text)
    created_at = Column(Text, nullable=False, server_default=text('CURRENT_TIMESTAMP'))

    tenant = relationship('Tenants', back_populates='appointments')
    professional = relationship('Professionals', back_populates='appointments')
    services = relationship('Services', secondary=t_appointment_services)


class BlockedTimes(Base):
    __tablename__ = 'blocked_times'

    tenant_id = Column(ForeignKey('tenants.id', ondelete='CASCADE'), nullable=False)
    date = Column(Text, nullable=False)  # YYYY-MM-DD, business-local
    start_time = Column(Text, nullable=False)
    end_time = Column(Text, nullable=False)
    kind = Column(Text, nullable=False, server_default=text("'manual'"))
    id = Column(Integer, primary_key=True)
    professional_id = Column(ForeignKey('professionals.id', ondelete='CASCADE'))  # NULL = whole business
    reason = Column(Text)
    created_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))

    tenant = relationship('Tenants', back_populates='blocked_times')
    professional = relationship('Professionals', back_populates='blocked_times')
