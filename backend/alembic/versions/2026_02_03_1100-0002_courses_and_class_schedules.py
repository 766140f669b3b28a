"""courses_and_class_schedules

Courses with syllabus units, section enrollments and weekly class schedules.

Revision ID: 0002
Revises: 0001
Create Date: 2026-02-03 11:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0002'
down_revision = '0001'
branch_labels = None
depends_on = None


weekday = sa.Enum(
    'MONDAY', 'TUESDAY', 'WEDNESDAY', 'THURSDAY', 'FRIDAY', 'SATURDAY', 'SUNDAY',
    name='weekday',
)


def upgrade() -> None:
    op.create_table('courses',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('course_code', sa.String(length=50), nullable=False),
        sa.Column('course_name', sa.String(length=255), nullable=False),
        sa.Column('course_description', sa.Text(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('created_by', sa.String(length=36), nullable=True),
        sa.Column('modified_by', sa.String(length=36), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('end_date > start_date', name='ck_courses_end_after_start'),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['modified_by'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_courses_course_code', 'courses', ['course_code'], unique=True)

    op.create_table('course_units',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('course_id', sa.String(length=36), nullable=False),
        sa.Column('unit_number', sa.Integer(), nullable=False),
        sa.Column('unit_name', sa.String(length=255), nullable=False),
        sa.Column('unit_description', sa.Text(), nullable=False),
        sa.Column('assignment_count', sa.Integer(), nullable=False),
        sa.Column('hours_per_unit', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['course_id'], ['courses.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('course_id', 'unit_number', name='uq_course_units_course_number')
    )

    op.create_table('enrollments',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('course_id', sa.String(length=36), nullable=False),
        sa.Column('student_id', sa.String(length=36), nullable=False),
        sa.Column('section', sa.String(length=10), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['course_id'], ['courses.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['student_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('course_id', 'student_id', name='uq_enrollments_course_student')
    )
    op.create_index('ix_enrollments_student_id', 'enrollments', ['student_id'], unique=False)

    op.create_table('class_schedules',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('course_id', sa.String(length=36), nullable=False),
        sa.Column('faculty_id', sa.String(length=36), nullable=False),
        sa.Column('room', sa.String(length=100), nullable=False),
        sa.Column('day_of_week', weekday, nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('section', sa.String(length=10), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('end_time > start_time', name='ck_class_schedules_end_after_start'),
        sa.ForeignKeyConstraint(['course_id'], ['courses.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['faculty_id'], ['faculty.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_class_schedules_course_id', 'class_schedules', ['course_id'], unique=False)
    op.create_index('ix_class_schedules_faculty_id', 'class_schedules', ['faculty_id'], unique=False)
    op.create_index('ix_class_schedules_day_room', 'class_schedules', ['day_of_week', 'room'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_class_schedules_day_room', table_name='class_schedules')
    op.drop_index('ix_class_schedules_faculty_id', table_name='class_schedules')
    op.drop_index('ix_class_schedules_course_id', table_name='class_schedules')
    op.drop_table('class_schedules')

    op.drop_index('ix_enrollments_student_id', table_name='enrollments')
    op.drop_table('enrollments')

    op.drop_table('course_units')

    op.drop_index('ix_courses_course_code', table_name='courses')
    op.drop_table('courses')

    weekday.drop(op.get_bind(), checkfirst=True)
