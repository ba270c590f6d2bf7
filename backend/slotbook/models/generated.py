from sqlalchemy import Column, Enum, ForeignKey, Integer, Text, UniqueConstraint, text

from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()
metadata = Base.metadata


class Organizations(Base):
    __tablename__ = 'organizations'

    name = Column(Text, nullable=False)
    id = Column(Integer, primary_key=True)
    created_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))

    users = relationship('Users', back_populates='organization')
    events = relationship('Events', back_populates='organization')
    availability_schedules = relationship('AvailabilitySchedules', back_populates='organization')


class Clients(Base):
    __tablename__ = 'clients'

    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    id = Column(Integer, primary_key=True)
    email = Column(Text)
    phone = Column(Text)

    users = relationship('Users', back_populates='client')
    bookings = relationship('Bookings', back_populates='client')


class Users(Base):
    __tablename__ = 'users'

    username = Column(Text, nullable=False, unique=True)
    role = Column(Enum('admin', 'user'), nullable=False, server_default=text("'user'"))
    id = Column(Integer, primary_key=True)
    client_id = Column(ForeignKey('clients.id', ondelete='SET NULL'))
    organization_id = Column(ForeignKey('organizations.id', ondelete='SET NULL'))

    client = relationship('Clients', back_populates='users')
    organization = relationship('Organizations', back_populates='users')
    events = relationship('Events', back_populates='user')
    availability_schedules = relationship('AvailabilitySchedules', back_populates='user')


class Events(Base):
    __tablename__ = 'events'
    __table_args__ = (
        UniqueConstraint('user_id', 'url_slug'),
    )

    id = Column(Text, primary_key=True)
    url_slug = Column(Text, nullable=False)
    title = Column(Text, nullable=False)
    user_id = Column(ForeignKey('users.id', ondelete='CASCADE'))
    organization_id = Column(ForeignKey('organizations.id', ondelete='CASCADE'))
    description = Column(Text)

    user = relationship('Users', back_populates='events')
    organization = relationship('Organizations', back_populates='events')
    event_options = relationship('EventOptions', back_populates='event')
    availability_schedules = relationship('AvailabilitySchedules', back_populates='event')


class Durations(Base):
    __tablename__ = 'durations'

    duration_minutes = Column(Integer, nullable=False, unique=True)
    id = Column(Integer, primary_key=True)

    event_options = relationship('EventOptions', back_populates='duration')


class EventOptions(Base):
    __tablename__ = 'event_options'

    event_id = Column(ForeignKey('events.id', ondelete='CASCADE'), nullable=False)
    capacity = Column(Integer, nullable=False, server_default=text('1'))
    is_default = Column(Integer, nullable=False, server_default=text('0'))
    id = Column(Integer, primary_key=True)
    duration_id = Column(ForeignKey('durations.id', ondelete='SET NULL'))

    event = relationship('Events', back_populates='event_options')
    duration = relationship('Durations', back_populates='event_options')
    bookings = relationship('Bookings', back_populates='event_option')


class AvailabilitySchedules(Base):
    __tablename__ = 'availability_schedules'

    start_time = Column(Text, nullable=False)
    end_time = Column(Text, nullable=False)
    timezone = Column(Text, nullable=False, server_default=text("'UTC'"))
    is_active = Column(Integer, nullable=False, server_default=text('1'))
    id = Column(Integer, primary_key=True)
    event_id = Column(ForeignKey('events.id', ondelete='CASCADE'))
    user_id = Column(ForeignKey('users.id', ondelete='CASCADE'))
    organization_id = Column(ForeignKey('organizations.id', ondelete='CASCADE'))
    day_of_week = Column(Enum(
        'monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday'
    ))
    specific_date = Column(Text)

    event = relationship('Events', back_populates='availability_schedules')
    user = relationship('Users', back_populates='availability_schedules')
    organization = relationship('Organizations', back_populates='availability_schedules')


class Bookings(Base):
    __tablename__ = 'bookings'

    event_option_id = Column(ForeignKey('event_options.id', ondelete='CASCADE'), nullable=False)
    date = Column(Text, nullable=False)
    time_slot = Column(Text, nullable=False)
    status = Column(
        Enum('pending', 'confirmed', 'cancelled', 'completed', 'no_show'),
        nullable=False,
        server_default=text("'pending'"),
    )
    id = Column(Integer, primary_key=True)
    client_id = Column(ForeignKey('clients.id', ondelete='SET NULL'))
    notes = Column(Text)
    created_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))

    event_option = relationship('EventOptions', back_populates='bookings')
    client = relationship('Clients', back_populates='bookings')
