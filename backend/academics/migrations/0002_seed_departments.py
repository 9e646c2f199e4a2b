from decimal import Decimal

from django.db import migrations

DEPARTMENTS = [
    ('Arts and Sciences', 'Department of Arts and Sciences offering liberal arts and science programs', '2500000'),
    ('Accountancy', 'Department of Accountancy providing accounting and financial management education', '2200000'),
    ('Business Administration', 'Department of Business Administration focusing on management and business studies', '2800000'),
    ('Criminal Justice Education', 'Department of Criminal Justice Education training future law enforcement professionals', '2100000'),
    ('Computer Studies', 'Department of Computer Studies offering technology and programming courses', '3200000'),
    ('Engineering Technology', 'Department of Engineering Technology providing technical and engineering education', '3500000'),
    ('Law', 'Department of Law offering legal education and jurisprudence programs', '2900000'),
    ('Nursing', 'Department of Nursing providing healthcare and medical education', '2700000'),
    ('Teacher Education', 'Department of Teacher Education training future educators and teaching professionals', '2400000'),
]


def seed_departments(apps, schema_editor):
    Department = apps.get_model('academics', 'Department')
    for name, description, budget in DEPARTMENTS:
        Department.objects.get_or_create(
            name=name,
            defaults={'description': description, 'budget': Decimal(budget), 'status': 'Active'},
        )


def unseed_departments(apps, schema_editor):
    Department = apps.get_model('academics', 'Department')
    Department.objects.filter(name__in=[name for name, _, _ in DEPARTMENTS]).delete()


class Migration(migrations.Migration):

    dependencies = [
        ('academics', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(seed_departments, unseed_departments),
    ]
